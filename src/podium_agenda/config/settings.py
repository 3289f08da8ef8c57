from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Podium Agenda"
APP_AUTHOR = "Podium"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    events_table: str
    artists_table: str
    programmers_table: str
    local_path: Path


@dataclass(frozen=True)
class AgendaSettings:
    upcoming_limit: int = 100
    days_ahead: int = 90
    tape_days_before: int = 7
    tape_days_after: int = 14
    tape_length: int = 14
    counts_limit: int = 200


@dataclass(frozen=True)
class UiSettings:
    timezone: Optional[str]
    locale: str


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    agenda: AgendaSettings
    ui: UiSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    default_backend = "supabase" if supabase.is_configured else "local"
    storage = StorageSettings(
        backend=os.getenv("PODIUM_STORE_BACKEND", default_backend).lower(),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "events"),
        artists_table=os.getenv("SUPABASE_ARTISTS_TABLE", "artists"),
        programmers_table=os.getenv("SUPABASE_PROGRAMMERS_TABLE", "programmers"),
        local_path=Path(os.getenv("PODIUM_LOCAL_STORE_PATH", DATA_DIR / "events.json")),
    )

    agenda = AgendaSettings(
        upcoming_limit=_int_from_env("PODIUM_AGENDA_UPCOMING_LIMIT", 100),
        days_ahead=_int_from_env("PODIUM_AGENDA_DAYS_AHEAD", 90),
        tape_days_before=_int_from_env("PODIUM_TAPE_DAYS_BEFORE", 7),
        tape_days_after=_int_from_env("PODIUM_TAPE_DAYS_AFTER", 14),
        tape_length=_int_from_env("PODIUM_TAPE_LENGTH", 14),
        counts_limit=_int_from_env("PODIUM_COUNTS_LIMIT", 200),
    )

    ui = UiSettings(
        timezone=os.getenv("PODIUM_TIMEZONE") or None,
        locale=os.getenv("PODIUM_LOCALE", "nl-BE"),
    )

    return AppSettings(supabase=supabase, storage=storage, agenda=agenda, ui=ui)
