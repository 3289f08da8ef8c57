from __future__ import annotations

import asyncio
import logging
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

import orjson

from ..domain import NotFound, StoreUnavailable
from .directory import Profile, ProfileDirectory
from .store import SERVER_TIMESTAMP, Document, EventStore, FieldFilter

logger = logging.getLogger(__name__)

DEFAULT_STATE: Dict[str, Any] = {
    "events": {},
    "artists": {},
    "programmers": {},
    "metadata": {"schema_version": 1},
}

_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda left, right: left == right,
    ">=": lambda left, right: left >= right,
    "<=": lambda left, right: left <= right,
    ">": lambda left, right: left > right,
    "<": lambda left, right: left < right,
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class LocalStateFile:
    """JSON state shared by the local event store and profile directory.

    ``path=None`` keeps everything in memory.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._state: Optional[Dict[str, Any]] = None

    def _ensure_materialized(self) -> None:
        if self._state is not None:
            return
        if self._path is None or not self._path.exists():
            self._state = deepcopy(DEFAULT_STATE)
            return
        try:
            raw = self._path.read_bytes()
            loaded = orjson.loads(raw) if raw else {}
        except (OSError, orjson.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Cannot read local store {self._path}: {exc}") from exc
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_STATE.items():
            loaded.setdefault(key, deepcopy(value))
        self._state = loaded

    @property
    def data(self) -> Dict[str, Any]:
        self._ensure_materialized()
        assert self._state is not None
        return self._state

    def persist(self) -> None:
        if self._state is None or self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
            self._path.write_bytes(payload + b"\n")
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write local store {self._path}: {exc}") from exc


class LocalEventStore(EventStore):
    """File-backed (or in-memory) event store for development and tests.

    Every mutation holds ``_lock`` for its whole read-modify-write, so array
    updates behave atomically for concurrent coroutines.
    """

    def __init__(self, state: Optional[LocalStateFile] = None, *, clock: Callable[[], str] = _utc_now) -> None:
        self._state = state or LocalStateFile()
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def _events(self) -> Dict[str, Document]:
        return self._state.data["events"]

    def _resolve_sentinels(self, fields: Document) -> Document:
        now = self._clock()
        return {key: (now if value is SERVER_TIMESTAMP else deepcopy(value)) for key, value in fields.items()}

    def _require(self, doc_id: str) -> Document:
        document = self._events.get(doc_id)
        if document is None:
            raise NotFound(doc_id)
        return document

    async def create(self, document: Document) -> str:
        async with self._lock:
            doc_id = uuid4().hex
            stored = self._resolve_sentinels(document)
            stored.pop("id", None)
            stored.setdefault("created_at", self._clock())
            stored.setdefault("updated_at", stored["created_at"])
            self._events[doc_id] = stored
            self._state.persist()
            return doc_id

    async def read(self, doc_id: str) -> Optional[Document]:
        document = self._events.get(doc_id)
        if document is None:
            return None
        return {"id": doc_id, **deepcopy(document)}

    async def update(self, doc_id: str, fields: Document) -> None:
        async with self._lock:
            document = self._require(doc_id)
            resolved = self._resolve_sentinels(fields)
            resolved.pop("id", None)
            document.update(resolved)
            self._state.persist()

    async def delete(self, doc_id: str) -> bool:
        async with self._lock:
            removed = self._events.pop(doc_id, None)
            if removed is not None:
                self._state.persist()
            return removed is not None

    async def query(
        self,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        matches: list[Document] = []
        for doc_id, document in self._events.items():
            if order_by and document.get(order_by) is None:
                continue
            if all(self._matches(document, item) for item in filters):
                matches.append({"id": doc_id, **deepcopy(document)})
        if order_by:
            matches.sort(key=lambda doc: doc[order_by], reverse=descending)
        if limit is not None:
            matches = matches[:limit]
        return matches

    @staticmethod
    def _matches(document: Document, item: FieldFilter) -> bool:
        value = document.get(item.field)
        if value is None:
            return False
        return _COMPARATORS[item.op](value, item.value)

    async def array_union(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        async with self._lock:
            document = self._require(doc_id)
            values = list(document.get(field) or [])
            if value not in values:
                values.append(value)
            return self._write_array(doc_id, document, field, values, count_field)

    async def array_remove(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        async with self._lock:
            document = self._require(doc_id)
            values = [item for item in document.get(field) or [] if item != value]
            return self._write_array(doc_id, document, field, values, count_field)

    def _write_array(
        self,
        doc_id: str,
        document: Document,
        field: str,
        values: List[str],
        count_field: Optional[str],
    ) -> Document:
        document[field] = values
        if count_field:
            document[count_field] = len(values)
        document["updated_at"] = self._clock()
        self._state.persist()
        return {"id": doc_id, **deepcopy(document)}


class LocalProfileDirectory(ProfileDirectory):
    def __init__(self, state: Optional[LocalStateFile] = None) -> None:
        self._state = state or LocalStateFile()

    def add_artist(self, uid: str, profile: Profile) -> None:
        self._state.data["artists"][uid] = dict(profile)
        self._state.persist()

    def add_programmer(self, uid: str, profile: Profile) -> None:
        self._state.data["programmers"][uid] = dict(profile)
        self._state.persist()

    async def lookup_artist(self, uid: str) -> Optional[Profile]:
        profile = self._state.data["artists"].get(uid)
        return deepcopy(profile) if profile is not None else None

    async def lookup_programmer(self, uid: str) -> Optional[Profile]:
        profile = self._state.data["programmers"].get(uid)
        return deepcopy(profile) if profile is not None else None
