"""Display helpers for event dates."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Tuple

# (weekday abbreviations Monday-first, month abbreviations, weekday separator)
_LOCALES: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], str]] = {
    "nl-BE": (
        ("ma", "di", "wo", "do", "vr", "za", "zo"),
        ("jan", "feb", "mrt", "apr", "mei", "jun", "jul", "aug", "sep", "okt", "nov", "dec"),
        " ",
    ),
    "en-GB": (
        ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
        ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
        ", ",
    ),
}
DEFAULT_LOCALE = "nl-BE"


def _table(locale: str) -> Tuple[Tuple[str, ...], Tuple[str, ...], str]:
    return _LOCALES.get(locale, _LOCALES[DEFAULT_LOCALE])


def format_event_date(value: Optional[date | datetime], locale: str = DEFAULT_LOCALE) -> str:
    """``zo 1 jun 2025`` style; empty string for ``None``."""

    if value is None:
        return ""
    weekdays, months, separator = _table(locale)
    return f"{weekdays[value.weekday()]}{separator}{value.day} {months[value.month - 1]} {value.year}"


def format_short_date(value: Optional[date | datetime], locale: str = DEFAULT_LOCALE) -> str:
    if value is None:
        return ""
    _, months, _ = _table(locale)
    return f"{value.day} {months[value.month - 1]}"
