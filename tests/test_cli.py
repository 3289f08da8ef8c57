from __future__ import annotations

from datetime import date

from conftest import at

from podium_agenda.agenda.state import AgendaState
from podium_agenda.agenda.views import build_view
from podium_agenda.cli import build_parser, render_text
from podium_agenda.domain import ClusterEvent, EventType, Performer


def test_agenda_arguments() -> None:
    args = build_parser().parse_args(["agenda", "--date", "2025-06-01", "--type", "slam", "--type", "gig"])
    assert args.command == "agenda"
    assert args.date == "2025-06-01"
    assert args.types == ["slam", "gig"]
    assert args.region == "all"


def test_render_text_lists_events_and_marks_selected_day() -> None:
    event = ClusterEvent(
        id="e1",
        date=at(1, 20),
        city="Gent",
        venue="Vooruit",
        type=EventType.SLAM,
        event_name="Slam Night",
        event_time="20:30",
        attendees=["u1"],
        attendee_count=1,
        participants=[Performer(artist_id="p1", artist_name="Noor"), Performer(artist_id="p2", artist_name="Sam")],
    )
    view = build_view(AgendaState(selected_date=date(2025, 6, 1), events=(event,)), {"2025-06-01": 1}, today=date(2025, 5, 20))
    text = render_text(view, locale="nl-BE")
    assert "[1 jun:1]" in text
    assert "zo 1 jun 2025" in text
    assert "Slam Night @ Vooruit, Gent" in text
    assert "(1 going)" in text
    assert "with Noor, Sam" in text


def test_render_text_for_empty_day() -> None:
    view = build_view(AgendaState(selected_date=date(2025, 6, 2)), {}, today=date(2025, 5, 20))
    assert "No events on this date." in render_text(view, locale="en-GB")
