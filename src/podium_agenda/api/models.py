from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..agenda.views import AgendaView
from ..domain import AttendeeNotification, AttendeeProfile, ClusterEvent, Event, Performer, SoloEvent
from ..domain.dates import date_key
from ..services.aggregation import TapeDay


class PerformerPayload(BaseModel):
    artist_id: str
    artist_name: str
    artist_profile_pic_url: str = Field(default="")

    @classmethod
    def from_domain(cls, performer: Performer) -> "PerformerPayload":
        return cls(
            artist_id=performer.artist_id,
            artist_name=performer.artist_name,
            artist_profile_pic_url=performer.artist_profile_pic_url,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: Literal["solo", "cluster"]
    date: Optional[str] = Field(default=None)
    day: Optional[str] = Field(default=None)
    city: str
    venue: str
    type: str
    type_label: str
    link: str = Field(default="")
    attendees: List[str] = Field(default_factory=list)
    attendee_count: int = Field(default=0)
    supporters: List[str] = Field(default_factory=list)
    artist_id: Optional[str] = Field(default=None)
    artist_name: Optional[str] = Field(default=None)
    artist_profile_pic_url: Optional[str] = Field(default=None)
    event_name: Optional[str] = Field(default=None)
    event_time: Optional[str] = Field(default=None)
    participants: List[PerformerPayload] = Field(default_factory=list)
    coordinates: Optional[Dict[str, float]] = Field(default=None)
    created_at: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        payload: Dict[str, Any] = {
            "id": event.id,
            "kind": event.kind.value,
            "date": _iso(event.date),
            "day": date_key(event.date) if event.date else None,
            "city": event.city,
            "venue": event.venue,
            "type": event.type.value,
            "type_label": event.type.label,
            "link": event.link,
            "attendees": list(event.attendees),
            "attendee_count": event.attendee_count,
            "supporters": list(event.supporters),
            "created_at": _iso(event.created_at),
            "updated_at": _iso(event.updated_at),
        }
        if isinstance(event, SoloEvent):
            payload.update(
                artist_id=event.artist_id,
                artist_name=event.artist_name,
                artist_profile_pic_url=event.artist_profile_pic_url,
            )
        elif isinstance(event, ClusterEvent):
            payload.update(
                artist_id=event.artist_id,
                artist_name=event.artist_name,
                event_name=event.event_name,
                event_time=event.event_time,
                participants=[PerformerPayload.from_domain(item) for item in event.participants],
                coordinates=event.coordinates.to_record() if event.coordinates else None,
            )
        return cls(**payload)


class NotificationPayload(BaseModel):
    event_id: str
    venue: str
    city: str
    date: Optional[str] = Field(default=None)
    attendees: List[str]
    attendee_count: int

    @classmethod
    def from_domain(cls, notification: AttendeeNotification) -> "NotificationPayload":
        return cls(
            event_id=notification.event_id,
            venue=notification.venue,
            city=notification.city,
            date=_iso(notification.date),
            attendees=list(notification.attendees),
            attendee_count=notification.attendee_count,
        )


class ProfilePayload(BaseModel):
    uid: str
    name: str
    profile_pic_url: Optional[str] = Field(default=None)
    role: str

    @classmethod
    def from_domain(cls, profile: AttendeeProfile) -> "ProfilePayload":
        return cls(uid=profile.uid, name=profile.name, profile_pic_url=profile.profile_pic_url, role=profile.role)


class TapeDayPayload(BaseModel):
    day: str
    count: int
    is_selected: bool
    is_today: bool

    @classmethod
    def from_domain(cls, tape_day: TapeDay) -> "TapeDayPayload":
        return cls(
            day=tape_day.key,
            count=tape_day.count,
            is_selected=tape_day.is_selected,
            is_today=tape_day.is_today,
        )


class AgendaDayPayload(BaseModel):
    selected_date: str
    view_mode: str
    region: str
    types: List[str]
    counts: Dict[str, int]
    date_tape: List[TapeDayPayload]
    events: List[EventPayload]

    @classmethod
    def from_view(cls, view: AgendaView) -> "AgendaDayPayload":
        return cls(
            selected_date=view.selected_date.isoformat(),
            view_mode=view.view_mode.value,
            region=view.filters.region.value,
            types=[option.event_type.value for option in view.filters.types if option.active],
            counts=view.counts,
            date_tape=[TapeDayPayload.from_domain(item) for item in view.date_tape],
            events=[EventPayload.from_domain(event) for event in view.events],
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
