from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    GIG = "gig"
    OPEN_MIC = "open-mic"
    SLAM = "slam"
    WORKSHOP = "workshop"
    FEATURE = "feature"
    SHOWCASE = "showcase"
    SLAM_FINALE = "slam-finale"

    @property
    def label(self) -> str:
        return _EVENT_TYPE_LABELS[self]

    @classmethod
    def parse(cls, value: object) -> "EventType":
        """Return the member for ``value`` or raise ``ValueError``."""

        if isinstance(value, cls):
            return value
        return cls(str(value).strip())


_EVENT_TYPE_LABELS = {
    EventType.GIG: "Gig",
    EventType.OPEN_MIC: "Open Mic",
    EventType.SLAM: "Poetry Slam",
    EventType.WORKSHOP: "Workshop",
    EventType.FEATURE: "Feature",
    EventType.SHOWCASE: "Showcase",
    EventType.SLAM_FINALE: "Slam Finale",
}


class EventKind(str, Enum):
    SOLO = "solo"
    CLUSTER = "cluster"


class Region(str, Enum):
    ALL = "all"
    NEDERLAND = "nederland"
    VLAANDEREN = "vlaanderen"
    BRUSSEL = "brussel"


class ViewMode(str, Enum):
    LIST = "list"
    MAP = "map"


class UserRole(str, Enum):
    ARTIST = "artist"
    PROGRAMMER = "programmer"
    USER = "user"
