from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..data import SERVER_TIMESTAMP, Document, FieldFilter
from ..data.codec import event_from_document, event_to_document, to_store_timestamp
from ..data.store import eq, gte, lte
from ..domain import Event, EventType, SoloEvent, StoreUnavailable, ValidationError
from ..domain.dates import coerce_event_datetime, end_of_day, start_of_day
from . import aggregation
from .context import ServiceContext

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("artist_id", "artist_name", "date", "city", "venue", "type")
TRIMMED_FIELDS = ("city", "venue", "link")
# Written only by the attendance toggles and at creation.
PROTECTED_FIELDS = ("attendees", "attendee_count", "supporters", "is_cluster_event")


def _trim(value: Any) -> str:
    return str(value or "").strip()


@dataclass(slots=True)
class EventQueryService:
    """Composes store queries for the calendar and owns event writes.

    Read operations log and degrade to an empty result on ``StoreUnavailable``;
    ``add_event``, ``update_event`` and ``delete_event`` let errors propagate.
    """

    context: ServiceContext

    def _decode(self, documents: Iterable[Document]) -> List[Event]:
        events: list[Event] = []
        for document in documents:
            event = event_from_document(document, self.context.tz)
            if event is not None:
                events.append(event)
        return events

    def _timestamp(self, value: Any) -> str:
        return to_store_timestamp(coerce_event_datetime(value, self.context.tz))

    async def _run_query(
        self,
        description: str,
        filters: Sequence[FieldFilter],
        *,
        order_by: Optional[str] = "date",
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Event]:
        try:
            documents = await self.context.events.query(
                filters, order_by=order_by, descending=descending, limit=limit
            )
        except StoreUnavailable:
            logger.exception("Error fetching %s", description)
            return []
        events = self._decode(documents)
        logger.debug("Fetched %d %s", len(events), description)
        return events

    # -- writes ---------------------------------------------------------

    async def add_event(self, data: Mapping[str, Any]) -> str:
        missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)
        try:
            event_type = EventType.parse(data["type"])
        except ValueError as exc:
            raise ValidationError(f"Invalid event type: {data['type']}", fields=["type"]) from exc
        try:
            when = coerce_event_datetime(data["date"], self.context.tz)
        except ValueError as exc:
            raise ValidationError(f"Invalid event date: {data['date']!r}", fields=["date"]) from exc

        event = SoloEvent(
            id="",
            date=when,
            city=_trim(data["city"]),
            venue=_trim(data["venue"]),
            type=event_type,
            link=_trim(data.get("link")),
            artist_id=str(data["artist_id"]),
            artist_name=str(data["artist_name"]),
            artist_profile_pic_url=data.get("artist_profile_pic_url") or "",
        )
        document = event_to_document(event)
        document.update(created_at=SERVER_TIMESTAMP, updated_at=SERVER_TIMESTAMP)
        event_id = await self.context.events.create(document)
        logger.info("Event added: %s", event_id)
        return event_id

    async def update_event(self, event_id: str, fields: Mapping[str, Any]) -> None:
        protected = sorted(name for name in fields if name in PROTECTED_FIELDS)
        if protected:
            raise ValidationError(
                f"Fields managed by attendance toggles cannot be updated: {', '.join(protected)}",
                fields=protected,
            )
        update: Document = {key: value for key, value in fields.items() if key not in ("id", "created_at")}
        if "date" in update and update["date"] is not None:
            try:
                update["date"] = self._timestamp(update["date"])
            except ValueError as exc:
                raise ValidationError(f"Invalid event date: {update['date']!r}", fields=["date"]) from exc
        if "type" in update:
            try:
                update["type"] = EventType.parse(update["type"]).value
            except ValueError as exc:
                raise ValidationError(f"Invalid event type: {update['type']}", fields=["type"]) from exc
        for name in TRIMMED_FIELDS:
            if name in update:
                update[name] = _trim(update[name])
        update["updated_at"] = SERVER_TIMESTAMP
        await self.context.events.update(event_id, update)
        logger.info("Event updated: %s", event_id)

    async def delete_event(self, event_id: str) -> None:
        await self.context.events.delete(event_id)
        logger.info("Event deleted: %s", event_id)

    # -- reads ----------------------------------------------------------

    async def get_event(self, event_id: str) -> Optional[Event]:
        try:
            document = await self.context.events.read(event_id)
        except StoreUnavailable:
            logger.exception("Error fetching event %s", event_id)
            return None
        if document is None:
            return None
        return event_from_document(document, self.context.tz)

    async def get_artist_events(
        self,
        artist_id: str,
        *,
        upcoming_only: bool = True,
        limit: int = 10,
    ) -> List[Event]:
        filters: list[FieldFilter] = [eq("artist_id", artist_id)]
        if upcoming_only:
            filters.append(gte("date", to_store_timestamp(self.context.now())))
        return await self._run_query(
            f"events for artist {artist_id}",
            filters,
            descending=not upcoming_only,
            limit=limit,
        )

    async def get_all_upcoming_events(self, *, limit: int = 50, days_ahead: int = 90) -> List[Event]:
        now = self.context.now()
        start = start_of_day(now, self.context.tz)
        end = now + timedelta(days=days_ahead)
        return await self._run_query(
            "upcoming events",
            [gte("date", to_store_timestamp(start)), lte("date", to_store_timestamp(end))],
            limit=limit,
        )

    async def get_events_for_date_range(
        self,
        start: datetime | date | str,
        end: datetime | date | str,
        *,
        limit: int = 100,
    ) -> List[Event]:
        """Events with ``start <= date <= end``, ascending by date.

        A date-only ``end`` covers that whole local day.
        """

        tz = self.context.tz
        lower = coerce_event_datetime(start, tz)
        upper = end_of_day(end, tz) if _is_date_only(end) else coerce_event_datetime(end, tz)
        return await self._run_query(
            "events for date range",
            [gte("date", to_store_timestamp(lower)), lte("date", to_store_timestamp(upper))],
            limit=limit,
        )

    async def has_event_on_date(self, artist_id: str, day: datetime | date | str) -> bool:
        tz = self.context.tz
        local_day = coerce_event_datetime(day, tz)
        filters = [
            eq("artist_id", artist_id),
            gte("date", to_store_timestamp(start_of_day(local_day, tz))),
            lte("date", to_store_timestamp(end_of_day(local_day, tz))),
        ]
        try:
            documents = await self.context.events.query(filters, limit=1)
        except StoreUnavailable:
            logger.exception("Error checking date availability for artist %s", artist_id)
            return False
        return bool(documents)

    def get_events_grouped_by_date(self, events: Iterable[Event]) -> Dict[str, List[Event]]:
        return aggregation.group_by_local_date(events)

    async def get_event_counts_per_date(
        self,
        start: datetime | date | str,
        end: datetime | date | str,
    ) -> Dict[str, int]:
        limit = self.context.settings.agenda.counts_limit
        events = await self.get_events_for_date_range(start, end, limit=limit)
        counts = aggregation.counts_per_date(events)
        logger.debug("Event counts calculated for %d dates", len(counts))
        return counts


def _is_date_only(value: Any) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and len(value.strip()) == 10
