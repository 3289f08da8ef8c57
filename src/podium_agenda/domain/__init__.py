"""Domain models for event scheduling and attendance."""

from __future__ import annotations

from .enums import EventKind, EventType, Region, UserRole, ViewMode
from .errors import AgendaError, NotFound, StoreUnavailable, ValidationError
from .models import (
    AnyEvent,
    AttendeeNotification,
    AttendeeProfile,
    ClusterEvent,
    CurrentUser,
    Event,
    GeoPoint,
    Performer,
    SoloEvent,
)

__all__ = [
    "AgendaError",
    "AnyEvent",
    "AttendeeNotification",
    "AttendeeProfile",
    "ClusterEvent",
    "CurrentUser",
    "Event",
    "EventKind",
    "EventType",
    "GeoPoint",
    "NotFound",
    "Performer",
    "Region",
    "SoloEvent",
    "StoreUnavailable",
    "UserRole",
    "ValidationError",
    "ViewMode",
]
