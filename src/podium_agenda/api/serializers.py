from __future__ import annotations

from typing import Any, Dict

from ..agenda.views import AgendaView
from ..domain import AttendeeNotification, AttendeeProfile, Event
from .models import AgendaDayPayload, EventPayload, NotificationPayload, ProfilePayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()


def serialize_notification(notification: AttendeeNotification) -> Dict[str, Any]:
    return NotificationPayload.from_domain(notification).model_dump()


def serialize_profile(profile: AttendeeProfile) -> Dict[str, Any]:
    return ProfilePayload.from_domain(profile).model_dump()


def serialize_agenda_view(view: AgendaView) -> Dict[str, Any]:
    return AgendaDayPayload.from_view(view).model_dump()
