"""Explorer page controller - platform agnostic.

An ExplorerPage is everything one list/detail page of the MeAd explorer
needs: the loaded collection, the query (search term, type filter, page), the
active selection with its detail record, the image carousel of that record
and the adaptive page size. Rendering layers read the state and call the
operations below; they never mutate the state objects themselves.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from mead.core.carousel_logic import CarouselController, CarouselState
from mead.core.errors import ExplorerError, describe_error
from mead.core.kinds import CollectionKind
from mead.core.logging import get_logger
from mead.core.page_size import LayoutMetrics, PageSizeEstimator
from mead.core.pagination import (
    DEFAULT_PAGE_SIZE,
    PageView,
    QueryState,
    RegionType,
    normalize_type,
    paginate,
)
from mead.core.records import CollectionItem
from mead.core.selection import SelectionController, SelectionState
from mead.ports.sources import CollectionSource

logger = get_logger(__name__)

D = TypeVar("D")


class ExplorerPage(Generic[D]):
    """Search, paginate and select over one remote collection.

    Args:
        source: Where the collection and detail records come from.
        page_size: Initial (and, without adaptive sizing, fixed) page size.
        adaptive_page_size: Whether layout measurements may change the page size.

    Example:
        page = ExplorerPage(create_source("conditions"))
        await page.load()
        await page.set_search("flu")
        page.view.page          # items on the current page
        page.selection.detail   # detail record of the active item
        page.next_image()
    """

    def __init__(
        self,
        source: CollectionSource[D],
        page_size: int = DEFAULT_PAGE_SIZE,
        adaptive_page_size: bool = True,
    ) -> None:
        self._source = source
        self._items: list[CollectionItem] = []
        self._is_list_loading = False
        self._list_error: ExplorerError | None = None
        self._query = QueryState(page_size=page_size)
        self._view = paginate(self._items, self._query)

        self._carousel_controller = CarouselController()
        self._carousel = self._carousel_controller.rekey(
            max_visible=self.kind.max_images
        )
        self._selection: SelectionController[D] = SelectionController(
            source.fetch_detail, on_change=self._on_selection_change
        )
        self._page_size_estimator = PageSizeEstimator(
            read=lambda: self._query.page_size,
            write=self.set_page_size,
            adaptive=adaptive_page_size,
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def kind(self) -> CollectionKind:
        return self._source.kind

    @property
    def items(self) -> Sequence[CollectionItem]:
        return self._items

    @property
    def is_list_loading(self) -> bool:
        return self._is_list_loading

    @property
    def list_error(self) -> str | None:
        return describe_error(self._list_error) if self._list_error else None

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def view(self) -> PageView:
        return self._view

    @property
    def selection(self) -> SelectionState[D]:
        return self._selection.state

    @property
    def carousel(self) -> CarouselState:
        return self._carousel

    @property
    def adaptive_page_size(self) -> bool:
        return self._page_size_estimator.adaptive

    @property
    def closed(self) -> bool:
        return self._selection.closed

    # -------------------------------------------------------------------------
    # Collection and query
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the collection and seed the selection.

        A failed fetch leaves the page with an empty collection and a list
        error; calling load() again issues a fresh request.
        """
        self._list_error = None
        self._is_list_loading = True
        try:
            items = await self._source.fetch_collection()
        except ExplorerError as ex:
            if self.closed:
                return
            self._list_error = ex
            self._items = []
            logger.warning(
                "collection_load_failed",
                kind=self.kind.name,
                error=describe_error(ex),
            )
        else:
            if self.closed:
                return
            self._items = list(items)
            logger.info("collection_loaded", kind=self.kind.name, count=len(items))
        finally:
            if not self.closed:
                self._is_list_loading = False

        await self._refresh()

    async def set_search(self, search_term: str) -> None:
        """Change the search term and go back to the first page."""
        self._query.search_term = search_term
        self._query.page_number = 1
        await self._refresh()

    async def set_type_filter(self, type_filter: str | None) -> None:
        """Restrict the list to one type ("city", "country", ...) or all types."""
        normalized = normalize_type(type_filter) or None
        if normalized == RegionType.ALL.value:
            normalized = None
        allowed = {t.value for t in self.kind.type_filters}
        if normalized is not None and normalized not in allowed:
            raise ValueError(
                f"Unsupported type filter for {self.kind.name}: {type_filter!r}"
            )
        self._query.type_filter = normalized
        self._query.page_number = 1
        await self._refresh()

    def set_page(self, page_number: int) -> None:
        """Go to a page; out-of-range numbers are clamped."""
        self._query.page_number = max(1, page_number)
        self._repaginate()

    def next_page(self) -> None:
        if self._view.has_next:
            self.set_page(self._view.page_number + 1)

    def prev_page(self) -> None:
        if self._view.has_prev:
            self.set_page(self._view.page_number - 1)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self._query.page_size = page_size
        self._repaginate()

    def observe_layout(self, metrics: LayoutMetrics) -> int | None:
        """Feed a layout measurement to the adaptive page size.

        Measurements are ignored while the filtered set is empty, since no
        list rows are rendered then.
        """
        if not self._view.filtered:
            return None
        return self._page_size_estimator.observe(metrics)

    def _repaginate(self) -> PageView:
        self._view = paginate(self._items, self._query)
        self._query.page_number = self._view.page_number
        return self._view

    async def _refresh(self) -> None:
        view = self._repaginate()
        await self._selection.sync(view.filtered)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    async def select(self, item_id: str) -> SelectionState[D]:
        """Show the detail record of an item of the filtered set.

        Raises:
            KeyError: If the id is not in the current filtered set.
        """
        if not any(item.id == item_id for item in self._view.filtered):
            raise KeyError(item_id)
        return await self._selection.select(item_id)

    def _on_selection_change(self, state: SelectionState[D]) -> None:
        detail = state.detail
        images = getattr(detail, "images", ()) if detail is not None else ()
        self._carousel = self._carousel_controller.rekey(
            images, max_visible=self.kind.max_images
        )

    # -------------------------------------------------------------------------
    # Carousel
    # -------------------------------------------------------------------------

    def next_image(self) -> CarouselState:
        self._carousel = self._carousel_controller.next_image(self._carousel)
        return self._carousel

    def prev_image(self) -> CarouselState:
        self._carousel = self._carousel_controller.prev_image(self._carousel)
        return self._carousel

    def go_to_image(self, index: int) -> CarouselState:
        self._carousel = self._carousel_controller.go_to_index(self._carousel, index)
        return self._carousel

    def report_image_failure(self, url: str) -> CarouselState:
        self._carousel = self._carousel_controller.report_load_failure(
            self._carousel, url
        )
        return self._carousel

    def swipe(self, displacement: float) -> CarouselState:
        self._carousel = self._carousel_controller.swipe(self._carousel, displacement)
        return self._carousel

    def begin_swipe(self, x: float) -> CarouselState:
        self._carousel = self._carousel_controller.begin_swipe(self._carousel, x)
        return self._carousel

    def end_swipe(self, x: float) -> CarouselState:
        self._carousel = self._carousel_controller.end_swipe(self._carousel, x)
        return self._carousel

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Tear the page down. Results still in flight are discarded."""
        self._selection.close()
        logger.debug("explorer_page_closed", kind=self.kind.name)
