"""Storage contract for the ``events`` document collection.

Stores speak plain documents (``dict`` with snake_case keys, timestamps as
UTC ISO-8601 strings) and carry no business rules. All methods are coroutines
and raise ``StoreUnavailable`` when the backend cannot be reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

Document = Dict[str, Any]


class _ServerTimestamp:
    """Placeholder resolved by the store to its own current time."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

FILTER_OPERATORS = ("==", ">=", "<=", ">", "<")


@dataclass(frozen=True, slots=True)
class FieldFilter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")


def eq(field: str, value: Any) -> FieldFilter:
    return FieldFilter(field, "==", value)


def gte(field: str, value: Any) -> FieldFilter:
    return FieldFilter(field, ">=", value)


def lte(field: str, value: Any) -> FieldFilter:
    return FieldFilter(field, "<=", value)


class EventStore(ABC):
    """Typed CRUD and query primitives over a single collection."""

    @abstractmethod
    async def create(self, document: Document) -> str:
        """Insert ``document`` and return the identifier the store assigned."""

    @abstractmethod
    async def read(self, doc_id: str) -> Optional[Document]:
        """Return the document with its ``id`` key, or ``None`` when absent."""

    @abstractmethod
    async def update(self, doc_id: str, fields: Document) -> None:
        """Merge ``fields`` into an existing document; ``NotFound`` when absent."""

    @abstractmethod
    async def delete(self, doc_id: str) -> bool:
        """Remove the document. Returns whether anything was deleted."""

    @abstractmethod
    async def query(
        self,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Documents matching every filter.

        Documents lacking a filtered or ordered field are left out.
        """

    @abstractmethod
    async def array_union(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        """Atomically add ``value`` to the array ``field``.

        When ``count_field`` is given it is set to the array's new length in the
        same write. Returns the updated document; ``NotFound`` when absent.
        """

    @abstractmethod
    async def array_remove(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        """Atomic counterpart of :meth:`array_union` removing ``value``."""
