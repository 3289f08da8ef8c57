"""Agenda state and its pure transitions.

``reduce(state, action)`` never mutates ``state``; it returns a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional, Tuple, Union

from ..domain import Event, EventType, Region, ViewMode
from ..services.filters import AgendaFilters


@dataclass(frozen=True, slots=True)
class AgendaState:
    selected_date: date
    events: Tuple[Event, ...] = ()
    filters: AgendaFilters = field(default_factory=AgendaFilters)
    view_mode: ViewMode = ViewMode.LIST
    is_loading: bool = False

    @classmethod
    def initial(cls, today: date) -> "AgendaState":
        return cls(selected_date=today)

    def find_event(self, event_id: str) -> Optional[Event]:
        for event in self.events:
            if event.id == event_id:
                return event
        return None


@dataclass(frozen=True, slots=True)
class Reset:
    today: date


@dataclass(frozen=True, slots=True)
class LoadStarted:
    pass


@dataclass(frozen=True, slots=True)
class LoadFinished:
    events: Tuple[Event, ...] = ()


@dataclass(frozen=True, slots=True)
class SelectDate:
    day: date


@dataclass(frozen=True, slots=True)
class ToggleTypeFilter:
    event_type: EventType


@dataclass(frozen=True, slots=True)
class SetRegionFilter:
    region: Region


@dataclass(frozen=True, slots=True)
class ToggleViewMode:
    pass


@dataclass(frozen=True, slots=True)
class AttendanceChanged:
    event_id: str
    user_id: str
    attending: bool


Action = Union[
    Reset,
    LoadStarted,
    LoadFinished,
    SelectDate,
    ToggleTypeFilter,
    SetRegionFilter,
    ToggleViewMode,
    AttendanceChanged,
]


def _patch_attendance(event: Event, user_id: str, attending: bool) -> Event:
    attendees = [uid for uid in event.attendees if uid != user_id]
    if attending:
        attendees.append(user_id)
    return replace(event, attendees=attendees, attendee_count=len(attendees))


def reduce(state: AgendaState, action: Action) -> AgendaState:
    if isinstance(action, Reset):
        return AgendaState.initial(action.today)
    if isinstance(action, LoadStarted):
        return replace(state, is_loading=True)
    if isinstance(action, LoadFinished):
        return replace(state, events=tuple(action.events), is_loading=False)
    if isinstance(action, SelectDate):
        return replace(state, selected_date=action.day)
    if isinstance(action, ToggleTypeFilter):
        types = set(state.filters.types)
        types.symmetric_difference_update({action.event_type})
        return replace(state, filters=replace(state.filters, types=frozenset(types)))
    if isinstance(action, SetRegionFilter):
        return replace(state, filters=replace(state.filters, region=action.region))
    if isinstance(action, ToggleViewMode):
        mode = ViewMode.MAP if state.view_mode is ViewMode.LIST else ViewMode.LIST
        return replace(state, view_mode=mode)
    if isinstance(action, AttendanceChanged):
        events = tuple(
            _patch_attendance(event, action.user_id, action.attending) if event.id == action.event_id else event
            for event in state.events
        )
        return replace(state, events=events)
    raise TypeError(f"Unknown agenda action: {action!r}")
