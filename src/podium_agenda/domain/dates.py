"""Local-day arithmetic shared by the store codec, aggregation and agenda."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo


def resolve_timezone(name: Optional[str] = None) -> tzinfo:
    """Return the named IANA zone, or the host's local zone when ``name`` is empty."""

    if name:
        return ZoneInfo(name)
    local = datetime.now().astimezone().tzinfo
    assert local is not None
    return local


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express ``value`` in ``tz``. Naive values are taken as wall time in ``tz``."""

    zone = tz or resolve_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def start_of_day(value: datetime | date | str, tz: Optional[tzinfo] = None) -> datetime:
    if isinstance(value, str):
        value = coerce_event_datetime(value, tz)
    if isinstance(value, datetime):
        value = to_local(value, tz).date() if value.tzinfo else value.date()
    return datetime.combine(value, time.min, tzinfo=tz or resolve_timezone())


def end_of_day(value: datetime | date | str, tz: Optional[tzinfo] = None) -> datetime:
    return start_of_day(value, tz) + timedelta(days=1, microseconds=-1)


def date_key(value: datetime | date) -> str:
    """Format the local calendar day of ``value`` as ``YYYY-MM-DD``.

    Uses the year/month/day fields of the value as given; callers hand in
    datetimes that are already expressed in the local zone.
    """

    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date_key(key: str) -> date:
    try:
        return date.fromisoformat(key)
    except ValueError as exc:
        raise ValueError(f"Invalid date key: {key!r}") from exc


def coerce_event_datetime(value: Any, tz: Optional[tzinfo] = None) -> datetime:
    """Turn user input into an aware datetime in the local zone.

    Date-only input (``date`` objects or ``YYYY-MM-DD`` strings) resolves to
    local midnight of that day.
    """

    zone = tz or resolve_timezone()
    if isinstance(value, datetime):
        return to_local(value, zone)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=zone)
    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return datetime.combine(date.fromisoformat(raw), time.min, tzinfo=zone)
        return to_local(datetime.fromisoformat(raw.replace("Z", "+00:00")), zone)
    raise ValueError(f"Unsupported date value: {value!r}")
