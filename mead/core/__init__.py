"""Core explorer logic.

Platform-agnostic state and operations of the MeAd explorer: records,
filtering and pagination, selection, the image carousel and the adaptive page
size. Nothing in here knows about HTTP frameworks or rendering.
"""

from mead.core.carousel_logic import (
    SWIPE_DISTANCE_THRESHOLD,
    CarouselController,
    CarouselState,
)
from mead.core.errors import (
    ConfigurationError,
    ErrorCategory,
    ExplorerError,
    TransportError,
    classify_error,
    describe_error,
)
from mead.core.explorer import ExplorerPage
from mead.core.formatting import build_wikipedia_url, format_number
from mead.core.health import (
    HealthChecker,
    HealthReport,
    ServiceCheck,
    ServiceStatus,
    source_check,
)
from mead.core.kinds import CONDITIONS, KINDS, REGIONS, CollectionKind, get_kind
from mead.core.logging import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
    unbind_contextvars,
)
from mead.core.page_size import LayoutMetrics, PageSizeEstimator, estimate_page_size
from mead.core.pagination import (
    DEFAULT_PAGE_SIZE,
    PageView,
    QueryState,
    RegionType,
    filter_items,
    paginate,
)
from mead.core.records import (
    CollectionItem,
    ConditionDetail,
    DetailRecord,
    RegionDetail,
    WikidocInfo,
    normalize_image_key,
)
from mead.core.selection import SelectionController, SelectionPhase, SelectionState

__all__ = [
    # Carousel
    "SWIPE_DISTANCE_THRESHOLD",
    "CarouselController",
    "CarouselState",
    # Collections
    "CONDITIONS",
    "KINDS",
    "REGIONS",
    "CollectionKind",
    "get_kind",
    # Error handling
    "ConfigurationError",
    "ErrorCategory",
    "ExplorerError",
    "TransportError",
    "classify_error",
    "describe_error",
    # Explorer page
    "ExplorerPage",
    # Formatting
    "build_wikipedia_url",
    "format_number",
    # Health checks
    "HealthChecker",
    "HealthReport",
    "ServiceCheck",
    "ServiceStatus",
    "source_check",
    # Logging
    "bind_contextvars",
    "clear_contextvars",
    "configure_logging",
    "get_logger",
    "unbind_contextvars",
    # Page size
    "LayoutMetrics",
    "PageSizeEstimator",
    "estimate_page_size",
    # Pagination
    "DEFAULT_PAGE_SIZE",
    "PageView",
    "QueryState",
    "RegionType",
    "filter_items",
    "paginate",
    # Records
    "CollectionItem",
    "ConditionDetail",
    "DetailRecord",
    "RegionDetail",
    "WikidocInfo",
    "normalize_image_key",
    # Selection
    "SelectionController",
    "SelectionPhase",
    "SelectionState",
]
