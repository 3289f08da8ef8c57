"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    DATA_DIR,
    AgendaSettings,
    AppSettings,
    StorageSettings,
    SupabaseSettings,
    UiSettings,
    get_settings,
)

__all__ = [
    "DATA_DIR",
    "AgendaSettings",
    "AppSettings",
    "StorageSettings",
    "SupabaseSettings",
    "UiSettings",
    "get_settings",
]
