from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from podium_agenda.config import AgendaSettings, AppSettings, StorageSettings, SupabaseSettings, UiSettings
from podium_agenda.data import (
    Document,
    EventStore,
    FieldFilter,
    LocalEventStore,
    LocalProfileDirectory,
    LocalStateFile,
)
from podium_agenda.data.codec import to_store_timestamp
from podium_agenda.domain import StoreUnavailable
from podium_agenda.services import AttendanceTracker, EventQueryService, ServiceContext

CEST = timezone(timedelta(hours=2), "CEST")
NOW = datetime(2025, 5, 20, 12, 0, tzinfo=CEST)


def build_settings(tmp_path: Path, **agenda: int) -> AppSettings:
    return AppSettings(
        supabase=SupabaseSettings(url=None, anon_key=None),
        storage=StorageSettings(
            backend="local",
            events_table="events",
            artists_table="artists",
            programmers_table="programmers",
            local_path=tmp_path / "events.json",
        ),
        agenda=AgendaSettings(**agenda),
        ui=UiSettings(timezone=None, locale="nl-BE"),
    )


def solo_document(
    *,
    artist_id: str = "a1",
    artist_name: str = "Lotte",
    date: datetime,
    city: str = "Gent",
    venue: str = "De Centrale",
    type: str = "gig",
    attendees: Optional[List[str]] = None,
) -> Document:
    attendees = list(attendees or [])
    return {
        "is_cluster_event": False,
        "artist_id": artist_id,
        "artist_name": artist_name,
        "artist_profile_pic_url": "",
        "date": to_store_timestamp(date),
        "city": city,
        "venue": venue,
        "type": type,
        "link": "",
        "attendees": attendees,
        "attendee_count": len(attendees),
        "supporters": [],
    }


def cluster_document(
    *,
    date: datetime,
    event_name: str = "Slam Night",
    event_time: Optional[str] = None,
    city: str = "Antwerpen",
    venue: str = "Het Bos",
    type: str = "slam",
    coordinates: Optional[Dict[str, float]] = None,
) -> Document:
    return {
        "is_cluster_event": True,
        "event_name": event_name,
        "event_time": event_time,
        "date": to_store_timestamp(date),
        "city": city,
        "venue": venue,
        "type": type,
        "link": "",
        "participants": [{"artist_id": "p1", "artist_name": "Noor", "artist_profile_pic_url": ""}],
        "coordinates": coordinates,
        "attendees": [],
        "attendee_count": 0,
        "supporters": [],
    }


class UnavailableStore(EventStore):
    """Store whose every call fails as if the backend were down."""

    async def create(self, document: Document) -> str:
        raise StoreUnavailable("offline")

    async def read(self, doc_id: str) -> Optional[Document]:
        raise StoreUnavailable("offline")

    async def update(self, doc_id: str, fields: Document) -> None:
        raise StoreUnavailable("offline")

    async def delete(self, doc_id: str) -> bool:
        raise StoreUnavailable("offline")

    async def query(
        self,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        raise StoreUnavailable("offline")

    async def array_union(self, doc_id: str, field: str, value: str, *, count_field: Optional[str] = None) -> Document:
        raise StoreUnavailable("offline")

    async def array_remove(self, doc_id: str, field: str, value: str, *, count_field: Optional[str] = None) -> Document:
        raise StoreUnavailable("offline")


@pytest.fixture
def state_file() -> LocalStateFile:
    return LocalStateFile()


@pytest.fixture
def store(state_file: LocalStateFile) -> LocalEventStore:
    return LocalEventStore(state_file)


@pytest.fixture
def directory(state_file: LocalStateFile) -> LocalProfileDirectory:
    return LocalProfileDirectory(state_file)


@pytest.fixture
def clock_value() -> Dict[str, datetime]:
    return {"now": NOW}


@pytest.fixture
def context(tmp_path: Path, store: LocalEventStore, directory: LocalProfileDirectory, clock_value) -> ServiceContext:
    return ServiceContext(
        settings=build_settings(tmp_path),
        store=store,
        directory=directory,
        clock=lambda: clock_value["now"],
        timezone=CEST,
    )


@pytest.fixture
def offline_context(tmp_path: Path, directory: LocalProfileDirectory) -> ServiceContext:
    return ServiceContext(
        settings=build_settings(tmp_path),
        store=UnavailableStore(),
        directory=directory,
        clock=lambda: NOW,
        timezone=CEST,
    )


@pytest.fixture
def queries(context: ServiceContext) -> EventQueryService:
    return EventQueryService(context)


@pytest.fixture
def attendance(context: ServiceContext) -> AttendanceTracker:
    return AttendanceTracker(context)


def at(day: int, hour: int = 20, minute: int = 0, month: int = 6, tz: Any = CEST) -> datetime:
    return datetime(2025, month, day, hour, minute, tzinfo=tz)
