"""Supabase repositories backing the event store and profile directory."""

from __future__ import annotations

from .events import EventRepository
from .profiles import ProfileRepository

__all__ = ["EventRepository", "ProfileRepository"]
