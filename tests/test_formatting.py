from __future__ import annotations

from datetime import date, datetime

from conftest import CEST, at

from podium_agenda.domain.dates import end_of_day, start_of_day
from podium_agenda.services.formatting import format_event_date, format_short_date


def test_dutch_long_and_short_dates() -> None:
    assert format_event_date(at(1)) == "zo 1 jun 2025"
    assert format_short_date(at(1)) == "1 jun"
    assert format_event_date(date(2025, 3, 14), "nl-BE") == "vr 14 mrt 2025"


def test_english_dates() -> None:
    assert format_event_date(date(2025, 6, 7), "en-GB") == "Sat, 7 Jun 2025"
    assert format_short_date(date(2025, 10, 3), "en-GB") == "3 Oct"


def test_unknown_locale_falls_back_to_dutch() -> None:
    assert format_short_date(date(2025, 5, 2), "fr-BE") == "2 mei"


def test_missing_date_formats_as_empty() -> None:
    assert format_event_date(None) == ""
    assert format_short_date(None) == ""


def test_day_bounds_accept_day_strings() -> None:
    assert start_of_day("2025-06-01", CEST) == datetime(2025, 6, 1, tzinfo=CEST)
    assert end_of_day("2025-06-01", CEST) == datetime(2025, 6, 1, 23, 59, 59, 999999, tzinfo=CEST)
    assert end_of_day(date(2025, 6, 1), CEST) == end_of_day(at(1, 23), CEST)
