"""Active-item selection with race-safe detail loading.

The controller tracks which single item of the filtered set is shown in the
detail panel and loads its detail record. Each select() takes a new
generation token; a fetch result is applied only while its token is still the
newest one and the active id is still the one it was issued for, so a slow
response for a superseded selection is dropped instead of overwriting the
fresher one. close() advances the generation as well, which turns every
in-flight result into a no-op after teardown.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from mead.core.errors import ExplorerError, describe_error
from mead.core.logging import get_logger
from mead.core.records import CollectionItem

logger = get_logger(__name__)

D = TypeVar("D")


class SelectionPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SelectionState(Generic[D]):
    """Snapshot of the detail panel.

    Attributes:
        phase: Where the controller is in its load cycle.
        active_id: The selected item id, None when nothing is selected.
        detail: The loaded detail record (READY only).
        error: The failure that ended the load (FAILED only).
    """

    phase: SelectionPhase = SelectionPhase.IDLE
    active_id: str | None = None
    detail: D | None = None
    error: ExplorerError | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is SelectionPhase.LOADING

    @property
    def error_message(self) -> str | None:
        return describe_error(self.error) if self.error is not None else None


class SelectionController(Generic[D]):
    """Keeps one active item and its detail record consistent.

    Args:
        fetch_detail: Coroutine function loading the detail record of an id.
        on_change: Called with the new state after every applied transition.

    Example:
        controller = SelectionController(source.fetch_detail)
        await controller.sync(view.filtered)   # seeds the first item
        await controller.select("flu")
        controller.state.detail
    """

    def __init__(
        self,
        fetch_detail: Callable[[str], Awaitable[D]],
        on_change: Callable[[SelectionState[D]], None] | None = None,
    ) -> None:
        self._fetch_detail = fetch_detail
        self._on_change = on_change
        self._state: SelectionState[D] = SelectionState()
        self._generation = 0
        self._closed = False

    @property
    def state(self) -> SelectionState[D]:
        return self._state

    @property
    def active_id(self) -> str | None:
        return self._state.active_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def _set(self, state: SelectionState[D]) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)

    def _is_current(self, token: int, item_id: str) -> bool:
        return (
            not self._closed
            and token == self._generation
            and self._state.active_id == item_id
        )

    async def select(self, item_id: str) -> SelectionState[D]:
        """Make ``item_id`` the active item and load its detail record.

        Returns:
            The controller state once this request has resolved. When the
            request was superseded this is the state set by the newer request.
        """
        if self._closed:
            logger.debug("select_after_close_ignored", item_id=item_id)
            return self._state

        self._generation += 1
        token = self._generation
        self._set(SelectionState(phase=SelectionPhase.LOADING, active_id=item_id))

        try:
            detail = await self._fetch_detail(item_id)
        except ExplorerError as ex:
            if not self._is_current(token, item_id):
                logger.debug("stale_detail_error_discarded", item_id=item_id)
                return self._state
            logger.warning(
                "detail_fetch_failed",
                item_id=item_id,
                error=describe_error(ex),
            )
            self._set(
                SelectionState(phase=SelectionPhase.FAILED, active_id=item_id, error=ex)
            )
            return self._state

        if not self._is_current(token, item_id):
            logger.debug(
                "stale_detail_discarded",
                item_id=item_id,
                active_id=self._state.active_id,
            )
            return self._state

        self._set(
            SelectionState(phase=SelectionPhase.READY, active_id=item_id, detail=detail)
        )
        return self._state

    async def sync(self, filtered: Sequence[CollectionItem]) -> SelectionState[D]:
        """Re-validate the selection against a new filtered set.

        If the active item is still in ``filtered`` nothing changes. Otherwise
        the controller drops to IDLE and re-seeds with the first item, or
        stays IDLE when the set is empty.
        """
        if self._closed:
            return self._state

        active_id = self._state.active_id
        if active_id is not None and any(item.id == active_id for item in filtered):
            return self._state

        self._generation += 1
        if active_id is not None or self._state.phase is not SelectionPhase.IDLE:
            self._set(SelectionState())

        if filtered:
            return await self.select(filtered[0].id)
        return self._state

    def close(self) -> None:
        """Tear the controller down; pending results will be ignored."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        logger.debug("selection_closed", active_id=self._state.active_id)
