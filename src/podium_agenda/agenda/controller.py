from __future__ import annotations

import inspect
import logging
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, List, Optional, Union

from ..config import AgendaSettings
from ..domain import CurrentUser, EventType, Region
from ..domain.dates import parse_date_key
from ..services import AttendanceTracker, EventQueryService, ServiceContext
from .state import (
    Action,
    AgendaState,
    AttendanceChanged,
    LoadFinished,
    LoadStarted,
    Reset,
    SelectDate,
    SetRegionFilter,
    ToggleTypeFilter,
    ToggleViewMode,
    reduce,
)
from .views import AgendaView, build_view

logger = logging.getLogger(__name__)

Listener = Callable[[AgendaView], Union[None, Awaitable[None]]]


class AgendaController:
    """Owns one agenda state and re-renders it after every transition.

    The event list is fetched once in :meth:`init` and filtered locally from
    then on. The date-tape counts are queried from the store on every render,
    so the tape reflects live store state while the day list reflects the
    session cache. Renders are not coalesced: when two overlap, whichever
    resolves last is what listeners saw last.
    """

    def __init__(
        self,
        queries: EventQueryService,
        attendance: AttendanceTracker,
        *,
        current_user: Callable[[], Optional[CurrentUser]],
        today: Callable[[], date],
        settings: Optional[AgendaSettings] = None,
    ) -> None:
        self._queries = queries
        self._attendance = attendance
        self._current_user = current_user
        self._today = today
        self._settings = settings or AgendaSettings()
        self._state = AgendaState.initial(today())
        self._listeners: List[Listener] = []
        self._active = False
        self.last_view: Optional[AgendaView] = None

    @classmethod
    def from_context(cls, context: ServiceContext) -> "AgendaController":
        return cls(
            EventQueryService(context),
            AttendanceTracker(context),
            current_user=context.current_user,
            today=lambda: context.now().date(),
            settings=context.settings.agenda,
        )

    @property
    def state(self) -> AgendaState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a render listener; returns a callable that detaches it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action) -> AgendaState:
        self._state = reduce(self._state, action)
        return self._state

    async def init(self) -> Optional[AgendaView]:
        logger.info("Initializing agenda view")
        self._active = True
        self.dispatch(Reset(self._today()))
        self.dispatch(LoadStarted())
        events = await self._queries.get_all_upcoming_events(
            limit=self._settings.upcoming_limit,
            days_ahead=self._settings.days_ahead,
        )
        if not self._active:
            logger.debug("Agenda closed while loading; dropping %d events", len(events))
            return None
        self.dispatch(LoadFinished(tuple(events)))
        logger.info("Loaded %d agenda events", len(events))
        return await self.render()

    async def render(self) -> Optional[AgendaView]:
        if not self._active:
            return None
        selected = self._state.selected_date
        start = selected - timedelta(days=self._settings.tape_days_before)
        end = selected + timedelta(days=self._settings.tape_days_after)
        counts = await self._queries.get_event_counts_per_date(start, end)
        if not self._active:
            logger.debug("Agenda closed during render; skipping listeners")
            return None

        view = build_view(self._state, counts, today=self._today(), tape_length=self._settings.tape_length)
        self.last_view = view
        for listener in list(self._listeners):
            result = listener(view)
            if inspect.isawaitable(result):
                await result
        return view

    async def select_date(self, day: Union[date, datetime, str]) -> Optional[AgendaView]:
        if isinstance(day, str):
            day = parse_date_key(day)
        elif isinstance(day, datetime):
            day = day.date()
        self.dispatch(SelectDate(day))
        logger.debug("Date selected: %s", day)
        return await self.render()

    async def toggle_type_filter(self, event_type: Union[EventType, str]) -> Optional[AgendaView]:
        self.dispatch(ToggleTypeFilter(EventType.parse(event_type)))
        logger.debug("Type filters: %s", sorted(item.value for item in self._state.filters.types))
        return await self.render()

    async def set_region_filter(self, region: Union[Region, str]) -> Optional[AgendaView]:
        self.dispatch(SetRegionFilter(Region(region)))
        logger.debug("Region filter: %s", self._state.filters.region.value)
        return await self.render()

    async def toggle_view_mode(self) -> Optional[AgendaView]:
        self.dispatch(ToggleViewMode())
        logger.debug("View mode: %s", self._state.view_mode.value)
        return await self.render()

    async def toggle_attendance(self, event_id: str) -> Optional[bool]:
        """Toggle the current user's attendance and patch the cached event.

        Returns ``None`` without a signed-in user. Store failures propagate
        and leave the state untouched.
        """

        user = self._current_user()
        if user is None:
            logger.warning("Must be logged in to attend event %s", event_id)
            return None

        attending = await self._attendance.toggle_attendance(event_id, user.uid)
        if not self._active:
            return attending
        self.dispatch(AttendanceChanged(event_id=event_id, user_id=user.uid, attending=attending))
        await self.render()
        return attending

    def cleanup(self) -> None:
        self._listeners.clear()
        self._active = False
        self._state = AgendaState.initial(self._today())
        self.last_view = None
        logger.debug("Agenda view cleaned up")
