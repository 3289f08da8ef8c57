from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Union

from .enums import EventKind, EventType, UserRole


@dataclass(slots=True)
class Performer:
    artist_id: str
    artist_name: str
    artist_profile_pic_url: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Performer":
        return cls(
            artist_id=str(record.get("artist_id") or ""),
            artist_name=str(record.get("artist_name") or ""),
            artist_profile_pic_url=record.get("artist_profile_pic_url") or "",
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "artist_id": self.artist_id,
            "artist_name": self.artist_name,
            "artist_profile_pic_url": self.artist_profile_pic_url,
        }


@dataclass(slots=True)
class GeoPoint:
    lat: float
    lng: float

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> Optional["GeoPoint"]:
        if not record:
            return None
        try:
            return cls(lat=float(record["lat"]), lng=float(record["lng"]))
        except (KeyError, TypeError, ValueError):
            return None

    def to_record(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(slots=True, kw_only=True)
class Event:
    """Fields shared by every event variant.

    ``date`` is ``None`` only for historical documents written without one;
    such events never appear in date-bucketed views.
    """

    kind: ClassVar[EventKind]

    id: str
    date: Optional[datetime]
    city: str
    venue: str
    type: EventType
    link: str = ""
    attendees: List[str] = field(default_factory=list)
    attendee_count: int = 0
    supporters: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_cluster(self) -> bool:
        return self.kind is EventKind.CLUSTER

    @property
    def owner_id(self) -> Optional[str]:
        return None


@dataclass(slots=True, kw_only=True)
class SoloEvent(Event):
    kind: ClassVar[EventKind] = EventKind.SOLO

    artist_id: str
    artist_name: str
    artist_profile_pic_url: str = ""

    @property
    def owner_id(self) -> Optional[str]:
        return self.artist_id


@dataclass(slots=True, kw_only=True)
class ClusterEvent(Event):
    kind: ClassVar[EventKind] = EventKind.CLUSTER

    event_name: Optional[str] = None
    event_time: Optional[str] = None
    participants: List[Performer] = field(default_factory=list)
    coordinates: Optional[GeoPoint] = None
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None

    @property
    def owner_id(self) -> Optional[str]:
        return self.artist_id

    @property
    def has_lineup(self) -> bool:
        return bool(self.participants)


AnyEvent = Union[SoloEvent, ClusterEvent]


@dataclass(slots=True, frozen=True)
class CurrentUser:
    uid: str
    role: UserRole = UserRole.USER


@dataclass(slots=True)
class AttendeeNotification:
    event_id: str
    venue: str
    city: str
    date: Optional[datetime]
    attendees: List[str]

    @property
    def attendee_count(self) -> int:
        return len(self.attendees)


@dataclass(slots=True)
class AttendeeProfile:
    uid: str
    name: str
    profile_pic_url: Optional[str] = None
    role: str = UserRole.USER.value
