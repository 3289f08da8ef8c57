from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date
from typing import List, Optional

import pytest
from conftest import at, cluster_document, solo_document

from podium_agenda.agenda import AgendaController, AgendaView
from podium_agenda.agenda.state import (
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
from podium_agenda.agenda.views import build_view
from podium_agenda.data import LocalEventStore
from podium_agenda.domain import CurrentUser, EventType, Region, SoloEvent, ViewMode

TODAY = date(2025, 5, 20)


def _event(event_id: str, attendees: Optional[List[str]] = None) -> SoloEvent:
    return SoloEvent(
        id=event_id,
        date=at(1),
        city="Gent",
        venue="Vooruit",
        type=EventType.GIG,
        artist_id="a1",
        artist_name="Lotte",
        attendees=list(attendees or []),
        attendee_count=len(attendees or []),
    )


class TestReducer:
    def test_initial_state(self) -> None:
        state = AgendaState.initial(TODAY)
        assert state.selected_date == TODAY
        assert state.events == ()
        assert state.filters.types == frozenset()
        assert state.filters.region is Region.ALL
        assert state.view_mode is ViewMode.LIST
        assert state.is_loading is False

    def test_loading_cycle(self) -> None:
        loading = reduce(AgendaState.initial(TODAY), LoadStarted())
        assert loading.is_loading
        loaded = reduce(loading, LoadFinished((_event("e1"),)))
        assert not loaded.is_loading
        assert [event.id for event in loaded.events] == ["e1"]

    def test_transitions_do_not_mutate_input(self) -> None:
        state = AgendaState.initial(TODAY)
        selected = reduce(state, SelectDate(date(2025, 6, 1)))
        assert state.selected_date == TODAY
        assert selected.selected_date == date(2025, 6, 1)

    def test_type_filter_toggles_membership(self) -> None:
        state = AgendaState.initial(TODAY)
        on = reduce(state, ToggleTypeFilter(EventType.SLAM))
        assert on.filters.types == frozenset({EventType.SLAM})
        off = reduce(on, ToggleTypeFilter(EventType.SLAM))
        assert off.filters.types == frozenset()

    def test_region_and_view_mode(self) -> None:
        state = reduce(AgendaState.initial(TODAY), SetRegionFilter(Region.BRUSSEL))
        assert state.filters.region is Region.BRUSSEL
        mapped = reduce(state, ToggleViewMode())
        assert mapped.view_mode is ViewMode.MAP
        assert reduce(mapped, ToggleViewMode()).view_mode is ViewMode.LIST

    def test_reset_discards_everything(self) -> None:
        state = reduce(AgendaState.initial(TODAY), LoadFinished((_event("e1"),)))
        state = reduce(state, ToggleTypeFilter(EventType.GIG))
        assert reduce(state, Reset(date(2025, 7, 1))) == AgendaState.initial(date(2025, 7, 1))

    def test_attendance_patch_keeps_count_in_sync(self) -> None:
        state = reduce(AgendaState.initial(TODAY), LoadFinished((_event("e1"), _event("e2", ["u2"]))))
        joined = reduce(state, AttendanceChanged(event_id="e1", user_id="u1", attending=True))
        assert joined.find_event("e1").attendees == ["u1"]
        assert joined.find_event("e1").attendee_count == 1
        assert joined.find_event("e2").attendees == ["u2"]

        left = reduce(joined, AttendanceChanged(event_id="e1", user_id="u1", attending=False))
        assert left.find_event("e1").attendees == []
        assert left.find_event("e1").attendee_count == 0

    def test_unknown_action_is_rejected(self) -> None:
        with pytest.raises(TypeError):
            reduce(AgendaState.initial(TODAY), object())


def test_build_view_adds_markers_only_in_map_mode() -> None:
    state = AgendaState(selected_date=date(2025, 6, 1), events=(_event("e1"),))
    listed = build_view(state, {"2025-06-01": 1}, today=TODAY)
    assert listed.map_markers is None
    assert [event.id for event in listed.events] == ["e1"]
    assert [option.event_type for option in listed.filters.types] == list(EventType)

    mapped = build_view(replace(state, view_mode=ViewMode.MAP), {}, today=TODAY)
    assert list(mapped.map_markers) == ["gent"]


async def _seed(store: LocalEventStore) -> str:
    gig_id = await store.create(solo_document(date=at(1, 20), city="Gent"))
    await store.create(cluster_document(date=at(1, 19), city="Amsterdam", type="slam", event_time="19:00"))
    await store.create(solo_document(date=at(3, 20), city="Brussel", type="open-mic"))
    return gig_id


def test_controller_renders_selected_day(context, store) -> None:
    controller = AgendaController.from_context(context)
    views: List[AgendaView] = []
    controller.subscribe(views.append)

    async def scenario():
        await _seed(store)
        first = await controller.init()
        second = await controller.select_date("2025-06-01")
        return first, second

    first, second = asyncio.run(scenario())
    assert first.selected_date == TODAY
    assert first.is_empty
    assert len(controller.state.events) == 3

    assert second.selected_date == date(2025, 6, 1)
    assert [event.city for event in second.events] == ["Amsterdam", "Gent"]
    assert second.counts == {"2025-06-01": 2, "2025-06-03": 1}
    assert [day.key for day in second.date_tape if day.is_selected] == ["2025-06-01"]
    assert views == [first, second]


def test_controller_filters_locally(context, store) -> None:
    controller = AgendaController.from_context(context)

    async def scenario():
        await _seed(store)
        await controller.init()
        await controller.select_date(date(2025, 6, 1))
        by_type = await controller.toggle_type_filter("slam")
        await controller.toggle_type_filter(EventType.SLAM)
        by_region = await controller.set_region_filter("vlaanderen")
        mapped = await controller.toggle_view_mode()
        return by_type, by_region, mapped

    by_type, by_region, mapped = asyncio.run(scenario())
    assert [event.city for event in by_type.events] == ["Amsterdam"]
    assert [event.city for event in by_region.events] == ["Gent"]
    assert mapped.view_mode is ViewMode.MAP
    assert list(mapped.map_markers) == ["gent"]


def test_controller_toggle_attendance_updates_cache_and_store(context, store) -> None:
    signed_in = replace(context, user=CurrentUser(uid="u1"))
    controller = AgendaController.from_context(signed_in)

    async def scenario():
        gig_id = await _seed(store)
        await controller.init()
        await controller.select_date("2025-06-01")
        attending = await controller.toggle_attendance(gig_id)
        return gig_id, attending, await store.read(gig_id)

    gig_id, attending, document = asyncio.run(scenario())
    assert attending is True
    assert document["attendees"] == ["u1"]
    cached = controller.state.find_event(gig_id)
    assert cached.attendees == ["u1"]
    assert cached.attendee_count == 1
    assert controller.last_view.events[-1].attendee_count == 1


def test_controller_toggle_without_user_is_a_no_op(context, store) -> None:
    controller = AgendaController.from_context(context)

    async def scenario():
        gig_id = await _seed(store)
        await controller.init()
        return gig_id, await controller.toggle_attendance(gig_id), await store.read(gig_id)

    _, attending, document = asyncio.run(scenario())
    assert attending is None
    assert document["attendees"] == []


def test_cleanup_is_idempotent_and_detaches_listeners(context, store) -> None:
    controller = AgendaController.from_context(context)
    views: List[AgendaView] = []
    controller.subscribe(views.append)

    async def scenario():
        await controller.init()
        controller.cleanup()
        controller.cleanup()
        return await controller.render()

    assert asyncio.run(scenario()) is None
    assert len(views) == 1
    assert not controller.is_active
    assert controller.state == AgendaState.initial(TODAY)
    assert controller.last_view is None


def test_results_arriving_after_cleanup_are_dropped(context) -> None:
    class GatedStore(LocalEventStore):
        gate: asyncio.Event

        async def query(self, *args, **kwargs):
            await self.gate.wait()
            return await super().query(*args, **kwargs)

    gated = GatedStore()
    controller = AgendaController.from_context(replace(context, store=gated))
    views: List[AgendaView] = []
    controller.subscribe(views.append)

    async def scenario():
        gated.gate = asyncio.Event()
        await gated.create(solo_document(date=at(1)))
        task = asyncio.create_task(controller.init())
        await asyncio.sleep(0)
        controller.cleanup()
        gated.gate.set()
        return await task

    assert asyncio.run(scenario()) is None
    assert views == []
    assert controller.state.events == ()


def test_unsubscribe_detaches_listener(context) -> None:
    controller = AgendaController.from_context(context)
    views: List[AgendaView] = []
    unsubscribe = controller.subscribe(views.append)

    async def scenario():
        await controller.init()
        unsubscribe()
        await controller.render()

    asyncio.run(scenario())
    assert len(views) == 1


def test_async_listeners_are_awaited(context) -> None:
    controller = AgendaController.from_context(context)
    seen: List[date] = []

    async def listener(view: AgendaView) -> None:
        await asyncio.sleep(0)
        seen.append(view.selected_date)

    controller.subscribe(listener)
    asyncio.run(controller.init())
    assert seen == [TODAY]
