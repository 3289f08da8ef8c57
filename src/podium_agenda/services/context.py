from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Callable, Optional

from ..config import AppSettings, get_settings
from ..data import (
    EventStore,
    LocalEventStore,
    LocalProfileDirectory,
    LocalStateFile,
    ProfileDirectory,
    SupabaseGateway,
)
from ..data.repositories import EventRepository, ProfileRepository
from ..domain import CurrentUser
from ..domain.dates import resolve_timezone


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, stores and the clock.

    ``store`` and ``directory`` are built from settings unless supplied.
    """

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[EventStore] = None
    directory: Optional[ProfileDirectory] = None
    clock: Optional[Callable[[], datetime]] = None
    timezone: Optional[tzinfo] = None
    user: Optional[CurrentUser] = None
    gateway: SupabaseGateway = field(init=False)

    def __post_init__(self) -> None:
        self.gateway = SupabaseGateway(self.settings.supabase)
        if self.timezone is None:
            self.timezone = resolve_timezone(self.settings.ui.timezone)

        storage = self.settings.storage
        if storage.backend == "supabase":
            if self.store is None:
                self.store = EventRepository(gateway=self.gateway, table_name=storage.events_table)
            if self.directory is None:
                self.directory = ProfileRepository(
                    gateway=self.gateway,
                    artists_table=storage.artists_table,
                    programmers_table=storage.programmers_table,
                )
        elif storage.backend == "local":
            state = LocalStateFile(storage.local_path)
            if self.store is None:
                self.store = LocalEventStore(state)
            if self.directory is None:
                self.directory = LocalProfileDirectory(state)
        else:
            raise ValueError(f"Unknown store backend: {storage.backend!r}")

    @property
    def events(self) -> EventStore:
        assert self.store is not None
        return self.store

    @property
    def profiles(self) -> ProfileDirectory:
        assert self.directory is not None
        return self.directory

    @property
    def tz(self) -> tzinfo:
        assert self.timezone is not None
        return self.timezone

    def now(self) -> datetime:
        if self.clock is not None:
            return self.clock().astimezone(self.tz)
        return datetime.now(self.tz)

    def current_user(self) -> Optional[CurrentUser]:
        if self.user is not None:
            return self.user
        return self.gateway.current_user()
