from __future__ import annotations

from typing import Iterable


class AgendaError(Exception):
    """Base class for errors raised by the scheduling core."""


class ValidationError(AgendaError):
    """Raised when a write carries missing or invalid fields."""

    def __init__(self, message: str, *, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class StoreUnavailable(AgendaError):
    """Raised when the backing document store cannot be reached."""


class NotFound(AgendaError):
    """Raised when a referenced event does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event '{event_id}' not found.")
        self.event_id = event_id
