"""Data access layer."""

from __future__ import annotations

from .directory import ProfileDirectory
from .local import LocalEventStore, LocalProfileDirectory, LocalStateFile
from .store import SERVER_TIMESTAMP, Document, EventStore, FieldFilter
from .supabase import SupabaseGateway, SupabaseNotInitializedError, SupabaseSessionMissingError

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "EventStore",
    "FieldFilter",
    "LocalEventStore",
    "LocalProfileDirectory",
    "LocalStateFile",
    "ProfileDirectory",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "SupabaseSessionMissingError",
]
