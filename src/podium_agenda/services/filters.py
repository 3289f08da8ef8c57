"""Predicate composition over event lists, plus the city tables behind them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..domain import Event, EventType, Region
from ..domain.dates import date_key

EventPredicate = Callable[[Event], bool]

# Case-folded substrings; a city belongs to a region if it contains any of them.
REGION_CITIES: Dict[Region, Tuple[str, ...]] = {
    Region.NEDERLAND: (
        "amsterdam",
        "rotterdam",
        "utrecht",
        "den haag",
        "eindhoven",
        "groningen",
        "tilburg",
        "almere",
        "breda",
        "nijmegen",
    ),
    Region.VLAANDEREN: (
        "antwerpen",
        "gent",
        "brugge",
        "leuven",
        "mechelen",
        "aalst",
        "kortrijk",
        "hasselt",
        "oostende",
        "sint-niklaas",
    ),
    Region.BRUSSEL: ("brussel", "brussels", "bruxelles"),
}

CITY_COORDINATES: Dict[str, Tuple[float, float]] = {
    "amsterdam": (52.3676, 4.9041),
    "rotterdam": (51.9225, 4.4792),
    "den haag": (52.0705, 4.3007),
    "utrecht": (52.0907, 5.1214),
    "eindhoven": (51.4416, 5.4697),
    "groningen": (53.2194, 6.5665),
    "tilburg": (51.5555, 5.0913),
    "almere": (52.3508, 5.2647),
    "breda": (51.5719, 4.7683),
    "nijmegen": (51.8426, 5.8546),
    "arnhem": (51.9851, 5.8987),
    "haarlem": (52.3874, 4.6462),
    "enschede": (52.2215, 6.8937),
    "maastricht": (50.8514, 5.6910),
    "leiden": (52.1601, 4.4970),
    "dordrecht": (51.8133, 4.6901),
    "zwolle": (52.5168, 6.0830),
    "deventer": (52.2551, 6.1639),
    "delft": (52.0116, 4.3571),
    "alkmaar": (52.6324, 4.7534),
    "antwerpen": (51.2194, 4.4025),
    "gent": (51.0543, 3.7174),
    "brugge": (51.2093, 3.2247),
    "leuven": (50.8798, 4.7005),
    "mechelen": (51.0259, 4.4776),
    "aalst": (50.9365, 4.0382),
    "kortrijk": (50.8279, 3.2649),
    "hasselt": (50.9307, 5.3378),
    "oostende": (51.2154, 2.9286),
    "sint-niklaas": (51.1565, 4.1434),
    "genk": (50.9654, 5.5022),
    "roeselare": (50.9446, 3.1256),
    "turnhout": (51.3227, 4.9484),
    "brussel": (50.8503, 4.3517),
    "brussels": (50.8503, 4.3517),
    "bruxelles": (50.8503, 4.3517),
}


@dataclass(frozen=True, slots=True)
class AgendaFilters:
    types: FrozenSet[EventType] = field(default_factory=frozenset)
    region: Region = Region.ALL


def type_filter(types: Iterable[EventType]) -> EventPredicate:
    """Admit events of the given types; an empty set admits everything."""

    active = frozenset(types)
    if not active:
        return lambda event: True
    return lambda event: event.type in active


def region_filter(region: Region) -> EventPredicate:
    if region is Region.ALL:
        return lambda event: True

    def _admit(event: Event) -> bool:
        return region in regions_for_city(event.city)

    return _admit


def day_filter(day: date | datetime) -> EventPredicate:
    key = date_key(day)
    return lambda event: event.date is not None and date_key(event.date) == key


def compose(*predicates: EventPredicate) -> EventPredicate:
    return lambda event: all(predicate(event) for predicate in predicates)


def apply_filters(events: Iterable[Event], filters: AgendaFilters) -> List[Event]:
    predicate = compose(type_filter(filters.types), region_filter(filters.region))
    return [event for event in events if predicate(event)]


def events_on_day(events: Iterable[Event], day: date | datetime) -> List[Event]:
    predicate = day_filter(day)
    return [event for event in events if predicate(event)]


def regions_for_city(city: str) -> List[Region]:
    folded = (city or "").casefold()
    return [region for region, names in REGION_CITIES.items() if any(name in folded for name in names)]


def city_coordinates(city: Optional[str]) -> Optional[Tuple[float, float]]:
    if not city:
        return None
    folded = city.casefold().strip()
    if folded in CITY_COORDINATES:
        return CITY_COORDINATES[folded]
    for name, coords in CITY_COORDINATES.items():
        if name in folded or folded in name:
            return coords
    return None


@dataclass(slots=True)
class CityGroup:
    city: str
    coords: Tuple[float, float]
    events: List[Event] = field(default_factory=list)


def group_events_by_city(events: Iterable[Event]) -> Dict[str, CityGroup]:
    """Bucket events by city for map markers; cities without coordinates are dropped."""

    grouped: Dict[str, CityGroup] = {}
    for event in events:
        if not event.city:
            continue
        point = getattr(event, "coordinates", None)
        coords = (point.lat, point.lng) if point is not None else city_coordinates(event.city)
        if coords is None:
            continue
        key = event.city.casefold().strip()
        group = grouped.setdefault(key, CityGroup(city=event.city, coords=coords))
        group.events.append(event)
    return grouped
