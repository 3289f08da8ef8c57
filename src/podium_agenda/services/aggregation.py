"""Pure aggregations over already-fetched events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional

from ..domain import Event
from ..domain.dates import date_key


def _event_time(event: Event) -> Optional[str]:
    return getattr(event, "event_time", None) or None


def _order_by_time(bucket: List[Event]) -> List[Event]:
    """Sort events carrying an ``event_time`` among the slots they occupy.

    Events without a time keep their position, i.e. the order of the
    upstream query.
    """

    slots = [index for index, event in enumerate(bucket) if _event_time(event)]
    timed = sorted((bucket[index] for index in slots), key=lambda event: _event_time(event) or "")
    ordered = list(bucket)
    for index, event in zip(slots, timed):
        ordered[index] = event
    return ordered


def group_by_local_date(events: Iterable[Event]) -> Dict[str, List[Event]]:
    """Partition events by local calendar day (``YYYY-MM-DD``).

    Events without a date are left out. Keys appear in order of first
    occurrence.
    """

    grouped: Dict[str, List[Event]] = {}
    for event in events:
        if event.date is None:
            continue
        grouped.setdefault(date_key(event.date), []).append(event)
    return {key: _order_by_time(bucket) for key, bucket in grouped.items()}


def counts_per_date(events: Iterable[Event]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for event in events:
        if event.date is None:
            continue
        key = date_key(event.date)
        counts[key] = counts.get(key, 0) + 1
    return counts


@dataclass(frozen=True, slots=True)
class TapeDay:
    day: date
    key: str
    count: int
    is_selected: bool
    is_today: bool

    @property
    def has_events(self) -> bool:
        return self.count > 0


def date_tape(
    selected: date | datetime,
    counts: Mapping[str, int],
    *,
    today: date,
    days: int = 14,
) -> List[TapeDay]:
    """Day strip centred on ``selected``, starting ``days // 2`` days before it."""

    selected_day = selected.date() if isinstance(selected, datetime) else selected
    first = selected_day - timedelta(days=days // 2)
    tape: list[TapeDay] = []
    for offset in range(days):
        day = first + timedelta(days=offset)
        key = date_key(day)
        tape.append(
            TapeDay(
                day=day,
                key=key,
                count=counts.get(key, 0),
                is_selected=day == selected_day,
                is_today=day == today,
            )
        )
    return tape
