"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .attendance import AttendanceTracker
from .context import ServiceContext
from .events import EventQueryService

__all__ = ["AttendanceTracker", "EventQueryService", "ServiceContext"]
