"""Pydantic schemas for API request/response validation."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CollectionName(str, Enum):
    """Collections served by the explorer API."""

    CONDITIONS = "conditions"
    REGIONS = "regions"


# =============================================================================
# Requests
# =============================================================================


class SessionCreate(BaseModel):
    """Schema for opening an explorer page."""

    search: str = Field("", max_length=200)
    type: str | None = Field(None, description="Region type filter")
    page_size: int | None = Field(None, ge=1, le=200)

    model_config = ConfigDict(
        json_schema_extra={"example": {"search": "", "type": "country"}}
    )


class QueryUpdate(BaseModel):
    """Schema for changing the search term, type filter or page.

    A changed search term or type filter always goes back to page 1; ``page``
    and ``step`` are applied afterwards.
    """

    search: str | None = Field(None, max_length=200)
    type: str | None = None
    page: int | None = Field(None, ge=1)
    step: Literal["next", "prev"] | None = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"search": "asth", "page": 1}}
    )


class SelectRequest(BaseModel):
    """Schema for selecting an item of the current list."""

    id: str = Field(..., min_length=1)


class CarouselAction(BaseModel):
    """Schema for a carousel interaction.

    ``goto`` needs ``index``, ``swipe`` needs ``displacement``,
    ``swipe_start``/``swipe_end`` need ``x`` and ``image_error`` needs ``url``.
    """

    action: Literal["next", "prev", "goto", "swipe", "swipe_start", "swipe_end", "image_error"]
    index: int | None = None
    displacement: float | None = None
    x: float | None = None
    url: str | None = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"action": "swipe", "displacement": -64}}
    )


class LayoutReport(BaseModel):
    """Schema for a layout measurement taken by the front end, in pixels."""

    model_config = ConfigDict(allow_inf_nan=False)

    container_height: float = Field(..., description="Height of the detail card")
    row_height: float = 160.0
    row_gap: float = 0.0
    pagination_height: float = 0.0
    panel_gap: float = 0.0


# =============================================================================
# Responses
# =============================================================================


class ItemSummary(BaseModel):
    id: str
    name: str
    type: str | None = None
    active: bool = False


class TypeFilterOption(BaseModel):
    key: str
    label: str
    active: bool = False


class ListView(BaseModel):
    is_loading: bool = False
    error: str | None = None
    items: list[ItemSummary] = Field(default_factory=list)
    empty_message: str | None = None


class QueryView(BaseModel):
    search: str = ""
    type_filter: str | None = None
    type_filters: list[TypeFilterOption] = Field(default_factory=list)


class PaginationView(BaseModel):
    page_number: int
    total_pages: int
    page_size: int
    filtered_count: int
    has_prev: bool
    has_next: bool
    adaptive: bool = True


class CarouselView(BaseModel):
    images: list[str] = Field(default_factory=list)
    current_index: int = 0
    current_image: str | None = None
    total: int = 0
    has_multiple: bool = False


class SelectionView(BaseModel):
    phase: str
    active_id: str | None = None
    is_loading: bool = False
    error: str | None = None
    detail: dict[str, Any] | None = None
    carousel: CarouselView = Field(default_factory=CarouselView)


class ExplorerView(BaseModel):
    """Everything needed to render one explorer page."""

    session_id: str
    kind: CollectionName
    listing: ListView
    query: QueryView
    pagination: PaginationView
    selection: SelectionView


class DetailPageView(BaseModel):
    """A single record page."""

    kind: CollectionName
    detail: dict[str, Any]
    carousel: CarouselView


class PageSizeResponse(BaseModel):
    page_size: int
    changed: bool
    view: ExplorerView


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str
    detail: str | None = None
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Upstream request failed",
                "detail": "HTTP 503: Service Unavailable",
                "code": "SERVICE_UNAVAILABLE",
            }
        }
    )
