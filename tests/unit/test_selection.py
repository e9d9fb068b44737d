"""Tests for race-safe selection and detail loading."""

import asyncio

import pytest

from mead.core.errors import TransportError
from mead.core.records import CollectionItem
from mead.core.selection import SelectionController, SelectionPhase, SelectionState
from tests.mocks.sources import MockCollectionSource


def _items(*ids: str) -> list[CollectionItem]:
    return [CollectionItem(id=i, name=i.title()) for i in ids]


class TestSelectionState:
    def test_defaults_to_idle(self) -> None:
        state: SelectionState[str] = SelectionState()
        assert state.phase is SelectionPhase.IDLE
        assert state.active_id is None
        assert not state.is_loading
        assert state.error_message is None

    def test_error_message(self) -> None:
        state: SelectionState[str] = SelectionState(
            phase=SelectionPhase.FAILED, active_id="a", error=TransportError(500)
        )
        assert state.error_message == "HTTP 500"


class TestSelectionController:
    @pytest.mark.asyncio
    async def test_select_loads_detail(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        controller = SelectionController(source.fetch_detail)

        state = await controller.select("a")

        assert state.phase is SelectionPhase.READY
        assert state.active_id == "a"
        assert state.detail == "detail-a"

    @pytest.mark.asyncio
    async def test_loading_state_is_published(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        seen: list[SelectionState[str]] = []
        controller = SelectionController(source.fetch_detail, on_change=seen.append)

        await controller.select("a")

        assert [s.phase for s in seen] == [SelectionPhase.LOADING, SelectionPhase.READY]
        assert seen[0].detail is None

    @pytest.mark.asyncio
    async def test_failed_fetch_sets_error(self) -> None:
        source = MockCollectionSource()
        source.detail_errors["a"] = TransportError(503, "Service Unavailable")
        controller = SelectionController(source.fetch_detail)

        state = await controller.select("a")

        assert state.phase is SelectionPhase.FAILED
        assert state.detail is None
        assert state.error_message == "HTTP 503: Service Unavailable"

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self) -> None:
        """Select A, then B; B answers first, A answers last: B stays shown."""
        source = MockCollectionSource(details={"a": "detail-a", "b": "detail-b"})
        source.hold("a")
        controller = SelectionController(source.fetch_detail)

        task_a = asyncio.create_task(controller.select("a"))
        await asyncio.sleep(0)
        await controller.select("b")
        assert controller.state.detail == "detail-b"

        source.release("a")
        await task_a

        assert controller.state.active_id == "b"
        assert controller.state.detail == "detail-b"
        assert controller.state.phase is SelectionPhase.READY

    @pytest.mark.asyncio
    async def test_stale_error_is_discarded(self) -> None:
        source = MockCollectionSource(details={"b": "detail-b"})
        source.detail_errors["a"] = TransportError(500)
        source.hold("a")
        controller = SelectionController(source.fetch_detail)

        task_a = asyncio.create_task(controller.select("a"))
        await asyncio.sleep(0)
        await controller.select("b")
        source.release("a")
        await task_a

        assert controller.state.phase is SelectionPhase.READY
        assert controller.state.error is None

    @pytest.mark.asyncio
    async def test_sync_seeds_first_item(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        controller = SelectionController(source.fetch_detail)

        await controller.sync(_items("a", "b"))

        assert controller.active_id == "a"
        assert controller.state.detail == "detail-a"

    @pytest.mark.asyncio
    async def test_sync_keeps_selection_still_in_set(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a", "b": "detail-b"})
        controller = SelectionController(source.fetch_detail)
        await controller.select("b")
        generation = controller.generation

        await controller.sync(_items("a", "b"))

        assert controller.active_id == "b"
        assert controller.generation == generation
        assert source.detail_calls == ["b"]

    @pytest.mark.asyncio
    async def test_sync_reseeds_when_selection_filtered_out(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a", "c": "detail-c"})
        controller = SelectionController(source.fetch_detail)
        await controller.select("a")

        await controller.sync(_items("c"))

        assert controller.active_id == "c"
        assert controller.state.detail == "detail-c"

    @pytest.mark.asyncio
    async def test_sync_with_empty_set_goes_idle(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        controller = SelectionController(source.fetch_detail)
        await controller.select("a")

        await controller.sync([])

        assert controller.state == SelectionState()

    @pytest.mark.asyncio
    async def test_sync_invalidates_in_flight_fetch(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        source.hold("a")
        controller = SelectionController(source.fetch_detail)

        task = asyncio.create_task(controller.select("a"))
        await asyncio.sleep(0)
        await controller.sync([])
        source.release("a")
        await task

        assert controller.state.phase is SelectionPhase.IDLE
        assert controller.state.detail is None

    @pytest.mark.asyncio
    async def test_result_after_close_is_ignored(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        source.hold("a")
        seen: list[SelectionState[str]] = []
        controller = SelectionController(source.fetch_detail, on_change=seen.append)

        task = asyncio.create_task(controller.select("a"))
        await asyncio.sleep(0)
        controller.close()
        source.release("a")
        await task

        assert controller.closed
        assert controller.state.phase is SelectionPhase.LOADING
        assert [s.phase for s in seen] == [SelectionPhase.LOADING]

    @pytest.mark.asyncio
    async def test_select_after_close_is_noop(self) -> None:
        source = MockCollectionSource(details={"a": "detail-a"})
        controller = SelectionController(source.fetch_detail)
        controller.close()

        await controller.select("a")

        assert source.detail_calls == []
        assert controller.state == SelectionState()
