"""Filter and paginate a collection - platform agnostic.

paginate() is a pure function of the collection and the query. Keeping the
query consistent (resetting the page when the search term changes, writing
the clamped page number back) is the job of the owning ExplorerPage.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from mead.core.records import CollectionItem

DEFAULT_PAGE_SIZE = 8


class RegionType(str, Enum):
    """Region kinds offered as list filters on the geography explorer."""

    ALL = "all"
    CITY = "city"
    COUNTRY = "country"
    CONTINENT = "continent"

    @property
    def label(self) -> str:
        return _REGION_TYPE_LABELS[self]


_REGION_TYPE_LABELS = {
    RegionType.ALL: "All regions",
    RegionType.CITY: "Cities",
    RegionType.COUNTRY: "Countries",
    RegionType.CONTINENT: "Continents",
}


@dataclass
class QueryState:
    """Search term, type filter and page position of one explorer page.

    Attributes:
        search_term: Free text typed by the user, kept as typed.
        page_number: Requested 1-based page.
        page_size: Number of items per page.
        type_filter: Normalized type to keep, or None for every type.
    """

    search_term: str = ""
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    type_filter: str | None = None

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")
        if self.page_number < 1:
            raise ValueError(f"page_number must be at least 1, got {self.page_number}")


@dataclass(frozen=True)
class PageView:
    """Result of paginating a collection.

    Attributes:
        filtered: Every item matching the query, in collection order.
        page: The slice of ``filtered`` shown on the current page.
        total_pages: ceil(len(filtered) / page_size); 0 for an empty set.
        page_number: The requested page clamped to the available pages.
    """

    filtered: list[CollectionItem] = field(default_factory=list)
    page: list[CollectionItem] = field(default_factory=list)
    total_pages: int = 0
    page_number: int = 1

    @property
    def has_prev(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


def normalize_search_term(search_term: str) -> str:
    return search_term.strip().lower()


def normalize_type(type_value: str | None) -> str:
    """Lower-case and trim a type so "Country " and "country" compare equal."""
    if not type_value:
        return ""
    return str(type_value).strip().lower()


def matches(item: CollectionItem, search_term: str) -> bool:
    """Case-insensitive substring match against the item's name or id.

    Args:
        item: The item to test.
        search_term: A term already passed through normalize_search_term().
    """
    if not search_term:
        return True
    return search_term in item.name.lower() or search_term in str(item.id).lower()


def filter_items(
    items: Sequence[CollectionItem],
    search_term: str = "",
    type_filter: str | None = None,
) -> list[CollectionItem]:
    """Keep the items matching the type filter and then the search term."""
    wanted_type = normalize_type(type_filter)
    if wanted_type and wanted_type != RegionType.ALL.value:
        items = [item for item in items if normalize_type(item.type) == wanted_type]

    term = normalize_search_term(search_term)
    return [item for item in items if matches(item, term)]


def clamp_page_number(page_number: int, total_pages: int) -> int:
    if total_pages == 0:
        return 1
    return max(1, min(page_number, total_pages))


def paginate(items: Sequence[CollectionItem], query: QueryState) -> PageView:
    """Compute the filtered set and the current page for a query."""
    filtered = filter_items(items, query.search_term, query.type_filter)
    total_pages = math.ceil(len(filtered) / query.page_size)
    page_number = clamp_page_number(query.page_number, total_pages)
    start = (page_number - 1) * query.page_size

    return PageView(
        filtered=filtered,
        page=filtered[start : start + query.page_size],
        total_pages=total_pages,
        page_number=page_number,
    )

