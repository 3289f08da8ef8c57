from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from ..agenda.state import AgendaState
from ..agenda.views import build_view
from ..domain import EventType, Region
from ..domain.dates import coerce_event_datetime
from ..services.filters import AgendaFilters
from ..services.formatting import format_event_date, format_short_date
from .registry import register_api
from .serializers import serialize_agenda_view, serialize_event, serialize_notification, serialize_profile
from .state import api_state


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _parse_instant(value: str) -> datetime:
    try:
        return coerce_event_datetime(value, api_state.context.tz)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date or timestamp: {value}") from exc


@register_api(
    "add_event",
    description="Create a solo event for an artist and return its identifier.",
    category="events",
    tags=("write",),
    choices={"type": EventType},
)
async def add_event(
    *,
    artist_id: str,
    artist_name: str,
    date: str,
    city: str,
    venue: str,
    type: str,
    link: Optional[str] = None,
    artist_profile_pic_url: Optional[str] = None,
) -> Dict[str, Any]:
    event_id = await api_state.events.add_event(
        {
            "artist_id": artist_id,
            "artist_name": artist_name,
            "date": date,
            "city": city,
            "venue": venue,
            "type": type,
            "link": link,
            "artist_profile_pic_url": artist_profile_pic_url,
        }
    )
    return {"event_id": event_id}


@register_api(
    "update_event",
    description="Update fields of an existing event. The caller must own the event.",
    category="events",
    tags=("write",),
)
async def update_event(event_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    await api_state.events.update_event(event_id, fields)
    return {"updated": event_id}


@register_api(
    "delete_event",
    description="Permanently delete an event. The caller must own the event.",
    category="events",
    tags=("write",),
)
async def delete_event(event_id: str) -> Dict[str, Any]:
    await api_state.events.delete_event(event_id)
    return {"deleted": event_id}


@register_api(
    "get_event",
    description="Fetch a single event by identifier.",
    category="events",
    tags=("read",),
)
async def get_event(event_id: str) -> Dict[str, Any]:
    event = await api_state.events.get_event(event_id)
    return {"event": serialize_event(event) if event else None}


@register_api(
    "get_artist_events",
    description="List an artist's events, upcoming ones ascending or all of them newest first.",
    category="events",
    tags=("read",),
)
async def get_artist_events(artist_id: str, upcoming_only: bool = True, limit: int = 10) -> Dict[str, Any]:
    events = await api_state.events.get_artist_events(artist_id, upcoming_only=upcoming_only, limit=limit)
    return {"artist_id": artist_id, "events": [serialize_event(event) for event in events]}


@register_api(
    "get_all_upcoming_events",
    description="List events from the start of today up to a number of days ahead.",
    category="events",
    tags=("read",),
)
async def get_all_upcoming_events(limit: int = 50, days_ahead: int = 90) -> Dict[str, Any]:
    events = await api_state.events.get_all_upcoming_events(limit=limit, days_ahead=days_ahead)
    return {"events": [serialize_event(event) for event in events]}


@register_api(
    "get_events_for_date_range",
    description="List events within an inclusive date range, ascending by date.",
    category="events",
    tags=("read", "range"),
)
async def get_events_for_date_range(start: str, end: str, limit: int = 100) -> Dict[str, Any]:
    events = await api_state.events.get_events_for_date_range(_parse_instant(start), end, limit=limit)
    return {"start": start, "end": end, "events": [serialize_event(event) for event in events]}


@register_api(
    "get_events_grouped_by_date",
    description="Events within a date range bucketed by local calendar day.",
    category="events",
    tags=("read", "range"),
)
async def get_events_grouped_by_date(start: str, end: str, limit: int = 100) -> Dict[str, Any]:
    events = await api_state.events.get_events_for_date_range(_parse_instant(start), end, limit=limit)
    grouped = api_state.events.get_events_grouped_by_date(events)
    return {"days": {key: [serialize_event(event) for event in bucket] for key, bucket in grouped.items()}}


@register_api(
    "get_event_counts_per_date",
    description="Number of events per local calendar day within a date range, for the date tape.",
    category="events",
    tags=("read", "range"),
)
async def get_event_counts_per_date(start: str, end: str) -> Dict[str, Any]:
    counts = await api_state.events.get_event_counts_per_date(_parse_instant(start), end)
    return {"counts": counts}


@register_api(
    "has_event_on_date",
    description="Whether an artist already has an event on the given day.",
    category="events",
    tags=("read", "availability"),
)
async def has_event_on_date(artist_id: str, day: str) -> Dict[str, Any]:
    found = await api_state.events.has_event_on_date(artist_id, _parse_date(day))
    return {"artist_id": artist_id, "day": day, "has_event": found}


@register_api(
    "toggle_attendance",
    description="Toggle a user's 'going too' mark on an event and return the new membership.",
    category="attendance",
    tags=("write",),
)
async def toggle_attendance(event_id: str, user_id: str) -> Dict[str, Any]:
    attending = await api_state.attendance.toggle_attendance(event_id, user_id)
    return {"event_id": event_id, "user_id": user_id, "attending": attending}


@register_api(
    "is_user_attending",
    description="Whether a user marked an event as attending.",
    category="attendance",
    tags=("read",),
)
async def is_user_attending(event_id: str, user_id: str) -> Dict[str, Any]:
    attending = await api_state.attendance.is_user_attending(event_id, user_id)
    return {"event_id": event_id, "user_id": user_id, "attending": attending}


@register_api(
    "get_attendee_notifications",
    description="Attendees of an artist's events, excluding the artist.",
    category="attendance",
    tags=("read",),
)
async def get_attendee_notifications(artist_id: str) -> Dict[str, Any]:
    notifications = await api_state.attendance.get_attendee_notifications(artist_id)
    return {"notifications": [serialize_notification(item) for item in notifications]}


@register_api(
    "get_attendee_profiles",
    description="Resolve up to 20 user ids to display profiles.",
    category="attendance",
    tags=("read",),
)
async def get_attendee_profiles(user_ids: List[str]) -> Dict[str, Any]:
    profiles = await api_state.attendance.get_attendee_profiles(user_ids)
    return {"profiles": [serialize_profile(profile) for profile in profiles]}


@register_api(
    "agenda_day",
    description="Agenda snapshot for one day: date-tape counts and the filtered events of that day.",
    category="agenda",
    tags=("read", "agenda"),
    choices={"types": EventType, "region": Region},
)
async def agenda_day(
    day: Optional[str] = None,
    types: Optional[List[str]] = None,
    region: str = Region.ALL.value,
) -> Dict[str, Any]:
    context = api_state.context
    settings = context.settings.agenda
    today = context.now().date()
    selected = _parse_date(day) if day else today

    events = await api_state.events.get_events_for_date_range(selected, selected, limit=settings.upcoming_limit)
    counts = await api_state.events.get_event_counts_per_date(
        selected - timedelta(days=settings.tape_days_before),
        selected + timedelta(days=settings.tape_days_after),
    )
    state = AgendaState(
        selected_date=selected,
        events=tuple(events),
        filters=AgendaFilters(
            types=frozenset(EventType.parse(item) for item in types or ()),
            region=Region(region),
        ),
    )
    view = build_view(state, counts, today=today, tape_length=settings.tape_length)
    return serialize_agenda_view(view)


@register_api(
    "format_event_dates",
    description="Display strings for a date: long ('zo 1 jun 2025') and short ('1 jun').",
    category="display",
    tags=("format",),
)
def format_event_dates(value: str, locale: Optional[str] = None) -> Dict[str, str]:
    instant = _parse_instant(value)
    resolved = locale or api_state.context.settings.ui.locale
    return {
        "long": format_event_date(instant, resolved),
        "short": format_short_date(instant, resolved),
    }


@register_api(
    "add_supporter",
    description="Mark a user as supporter of an event. Supporters are separate from attendees.",
    category="attendance",
    tags=("write", "supporters"),
)
async def add_supporter(event_id: str, supporter_id: str) -> Dict[str, Any]:
    await api_state.attendance.add_supporter(event_id, supporter_id)
    return {"event_id": event_id, "supporter_id": supporter_id, "supporting": True}


@register_api(
    "remove_supporter",
    description="Remove a user from an event's supporters.",
    category="attendance",
    tags=("write", "supporters"),
)
async def remove_supporter(event_id: str, supporter_id: str) -> Dict[str, Any]:
    await api_state.attendance.remove_supporter(event_id, supporter_id)
    return {"event_id": event_id, "supporter_id": supporter_id, "supporting": False}
