from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from ..domain import Event, EventType, Region, ViewMode
from ..domain.dates import date_key
from ..services.aggregation import TapeDay, date_tape, group_by_local_date
from ..services.filters import CityGroup, apply_filters, events_on_day, group_events_by_city
from .state import AgendaState


@dataclass(frozen=True, slots=True)
class TypeOption:
    event_type: EventType
    label: str
    active: bool


@dataclass(frozen=True, slots=True)
class FilterPanel:
    types: List[TypeOption]
    region: Region
    regions: List[Region]


@dataclass(slots=True)
class AgendaView:
    """Everything a renderer needs for one frame of the agenda."""

    selected_date: date
    counts: Dict[str, int]
    date_tape: List[TapeDay]
    events: List[Event]
    filters: FilterPanel
    view_mode: ViewMode
    is_loading: bool
    map_markers: Optional[Dict[str, CityGroup]] = None

    @property
    def is_empty(self) -> bool:
        return not self.events


def build_filter_panel(state: AgendaState) -> FilterPanel:
    return FilterPanel(
        types=[
            TypeOption(event_type=event_type, label=event_type.label, active=event_type in state.filters.types)
            for event_type in EventType
        ],
        region=state.filters.region,
        regions=list(Region),
    )


def day_events(state: AgendaState) -> List[Event]:
    """Session-cached events for the selected day, filtered and ordered by time."""

    admitted = events_on_day(apply_filters(state.events, state.filters), state.selected_date)
    return group_by_local_date(admitted).get(date_key(state.selected_date), [])


def build_view(
    state: AgendaState,
    counts: Dict[str, int],
    *,
    today: date,
    tape_length: int = 14,
) -> AgendaView:
    events = day_events(state)
    return AgendaView(
        selected_date=state.selected_date,
        counts=dict(counts),
        date_tape=date_tape(state.selected_date, counts, today=today, days=tape_length),
        events=events,
        filters=build_filter_panel(state),
        view_mode=state.view_mode,
        is_loading=state.is_loading,
        map_markers=group_events_by_city(events) if state.view_mode is ViewMode.MAP else None,
    )
