"""Conversion between stored documents and domain events.

This module is the single boundary where store timestamps become domain
datetimes. Everything above it works with aware ``datetime`` values expressed
in the configured local zone.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional

from ..domain import AnyEvent, ClusterEvent, Event, EventType, GeoPoint, Performer, SoloEvent
from ..domain.dates import to_local
from .store import Document

logger = logging.getLogger(__name__)


def to_store_timestamp(value: datetime) -> str:
    """Render ``value`` as a UTC ISO-8601 string with a fixed layout.

    The fixed layout keeps lexicographic and chronological order identical.
    """

    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_store_timestamp(raw: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str):
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp value: {raw!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return to_local(parsed, tz)


def event_from_document(document: Document, tz: Optional[tzinfo] = None) -> Optional[AnyEvent]:
    """Decode a stored document, tolerating fields older documents lack.

    Returns ``None`` for documents whose ``type`` is outside the closed set and
    for malformed documents (unparseable timestamps, non-list arrays, ...).
    """

    try:
        return _decode_document(document, tz)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Skipping malformed event %s: %s", document.get("id"), exc)
        return None


def _decode_document(document: Document, tz: Optional[tzinfo]) -> Optional[AnyEvent]:
    try:
        event_type = EventType.parse(document.get("type"))
    except ValueError:
        logger.warning("Skipping event %s with unknown type %r", document.get("id"), document.get("type"))
        return None

    attendees = [str(uid) for uid in document.get("attendees") or []]
    stored_count = document.get("attendee_count")
    if stored_count is not None and int(stored_count) != len(attendees):
        logger.warning(
            "Event %s attendee_count %s differs from %d attendees; using attendee list",
            document.get("id"),
            stored_count,
            len(attendees),
        )

    common: Dict[str, Any] = {
        "id": str(document["id"]),
        "date": from_store_timestamp(document.get("date"), tz),
        "city": document.get("city") or "",
        "venue": document.get("venue") or "",
        "type": event_type,
        "link": document.get("link") or "",
        "attendees": attendees,
        "attendee_count": len(attendees),
        "supporters": [str(uid) for uid in document.get("supporters") or []],
        "created_at": from_store_timestamp(document.get("created_at"), tz),
        "updated_at": from_store_timestamp(document.get("updated_at"), tz),
    }

    if document.get("is_cluster_event"):
        return ClusterEvent(
            **common,
            event_name=document.get("event_name"),
            event_time=document.get("event_time") or None,
            participants=[Performer.from_record(item) for item in document.get("participants") or []],
            coordinates=GeoPoint.from_record(document.get("coordinates")),
            artist_id=document.get("artist_id"),
            artist_name=document.get("artist_name"),
        )
    return SoloEvent(
        **common,
        artist_id=str(document.get("artist_id") or ""),
        artist_name=str(document.get("artist_name") or ""),
        artist_profile_pic_url=document.get("artist_profile_pic_url") or "",
    )


def event_to_document(event: Event) -> Document:
    """Encode ``event`` for storage. ``id`` and the audit timestamps are left to the store."""

    document: Document = {
        "is_cluster_event": event.is_cluster,
        "date": to_store_timestamp(event.date) if event.date else None,
        "city": event.city,
        "venue": event.venue,
        "type": event.type.value,
        "link": event.link,
        "attendees": list(event.attendees),
        "attendee_count": len(event.attendees),
        "supporters": list(event.supporters),
    }
    if isinstance(event, SoloEvent):
        document.update(
            artist_id=event.artist_id,
            artist_name=event.artist_name,
            artist_profile_pic_url=event.artist_profile_pic_url,
        )
    elif isinstance(event, ClusterEvent):
        document.update(
            event_name=event.event_name,
            event_time=event.event_time,
            participants=[performer.to_record() for performer in event.participants],
            coordinates=event.coordinates.to_record() if event.coordinates else None,
            artist_id=event.artist_id,
            artist_name=event.artist_name,
        )
    return document
