from __future__ import annotations

from datetime import date

from conftest import at

from podium_agenda.domain import ClusterEvent, EventType, GeoPoint, Region, SoloEvent
from podium_agenda.services.filters import (
    REGION_CITIES,
    AgendaFilters,
    apply_filters,
    city_coordinates,
    compose,
    day_filter,
    events_on_day,
    group_events_by_city,
    region_filter,
    regions_for_city,
    type_filter,
)


def solo(event_id: str, city: str, event_type: EventType = EventType.GIG, day: int = 1) -> SoloEvent:
    return SoloEvent(
        id=event_id,
        date=at(day),
        city=city,
        venue="Zaal",
        type=event_type,
        artist_id="a1",
        artist_name="Lotte",
    )


EVENTS = [
    solo("ams", "Amsterdam"),
    solo("gent", "Gent", EventType.SLAM),
    solo("bxl", "Brussel", EventType.OPEN_MIC),
    solo("ant", "Antwerpen Noord", EventType.WORKSHOP, day=2),
    solo("paris", "Paris"),
]


def ids(events) -> list:
    return [event.id for event in events]


def test_empty_type_filter_admits_everything() -> None:
    assert ids(filter(type_filter(()), EVENTS)) == ids(EVENTS)


def test_type_filter_admits_only_selected_types() -> None:
    admitted = list(filter(type_filter({EventType.SLAM, EventType.OPEN_MIC}), EVENTS))
    assert ids(admitted) == ["gent", "bxl"]


def test_region_all_admits_everything() -> None:
    assert ids(filter(region_filter(Region.ALL), EVENTS)) == ids(EVENTS)


def test_region_filter_matches_city_substrings_case_insensitively() -> None:
    assert ids(filter(region_filter(Region.NEDERLAND), EVENTS)) == ["ams"]
    assert ids(filter(region_filter(Region.VLAANDEREN), EVENTS)) == ["gent", "ant"]
    assert ids(filter(region_filter(Region.BRUSSEL), [solo("x", "BRUXELLES")])) == ["x"]


def test_specific_regions_are_disjoint() -> None:
    regions = [Region.NEDERLAND, Region.VLAANDEREN, Region.BRUSSEL]
    for owner, city_names in REGION_CITIES.items():
        for city in city_names:
            matches = [region for region in regions if region_filter(region)(solo("x", city))]
            assert matches == [owner], city
            assert regions_for_city(city.title()) == [owner], city
    assert regions_for_city("Paris") == []


def test_apply_filters_combines_type_and_region() -> None:
    filters = AgendaFilters(types=frozenset({EventType.SLAM, EventType.GIG}), region=Region.VLAANDEREN)
    assert ids(apply_filters(EVENTS, filters)) == ["gent"]


def test_compose_requires_every_predicate() -> None:
    predicate = compose(type_filter({EventType.GIG}), day_filter(date(2025, 6, 1)))
    assert ids(filter(predicate, EVENTS)) == ["ams", "paris"]


def test_events_on_day() -> None:
    assert ids(events_on_day(EVENTS, date(2025, 6, 2))) == ["ant"]


def test_city_coordinates_lookup() -> None:
    assert city_coordinates("Gent") == (51.0543, 3.7174)
    assert city_coordinates("  ANTWERPEN ") == (51.2194, 4.4025)
    assert city_coordinates("Antwerpen Noord") == (51.2194, 4.4025)
    assert city_coordinates("Atlantis") is None
    assert city_coordinates(None) is None


def test_group_events_by_city_prefers_event_coordinates() -> None:
    venue_pin = ClusterEvent(
        id="pin",
        date=at(1),
        city="Gent",
        venue="Vooruit",
        type=EventType.SLAM,
        coordinates=GeoPoint(lat=51.05, lng=3.73),
    )
    grouped = group_events_by_city([solo("gent", "Gent"), venue_pin, solo("paris", "Paris")])
    assert list(grouped) == ["gent"]
    assert grouped["gent"].coords == (51.0543, 3.7174)
    assert ids(grouped["gent"].events) == ["gent", "pin"]

    pinned = group_events_by_city([venue_pin])
    assert pinned["gent"].coords == (51.05, 3.73)
