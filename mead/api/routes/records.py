"""Single record routes.

GET /conditions/{id} and GET /regions/{id} render one detail record without
opening an explorer session, for deep links and server-side rendering.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from mead.api.dependencies import AppState, get_app_state
from mead.api.presentation import carousel_view, detail_view
from mead.api.schemas import CollectionName, DetailPageView, ErrorResponse
from mead.core.carousel_logic import CarouselController
from mead.core.errors import (
    ConfigurationError,
    ExplorerError,
    TransportError,
    classify_error,
    describe_error,
)
from mead.core.logging import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["records"])

_RESPONSES: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Record not found"},
    502: {"model": ErrorResponse, "description": "Upstream request failed"},
    503: {"model": ErrorResponse, "description": "Upstream not configured"},
}


def _upstream_error(ex: ExplorerError) -> HTTPException:
    if isinstance(ex, ConfigurationError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        error = "Upstream not configured"
    elif isinstance(ex, TransportError) and ex.status == 404:
        status_code = status.HTTP_404_NOT_FOUND
        error = "Record not found"
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        error = "Upstream request failed"
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error,
            "detail": describe_error(ex),
            "code": classify_error(ex).name,
        },
    )


async def _record_page(
    app_state: AppState, kind: CollectionName, item_id: str
) -> DetailPageView:
    bind_contextvars(collection=kind.value, item_id=item_id)
    try:
        source = app_state.source(kind.value)
        try:
            detail = await source.fetch_detail(item_id)
        except ExplorerError as ex:
            logger.warning("record_fetch_failed", error=describe_error(ex))
            raise _upstream_error(ex) from ex

        carousel = CarouselController().rekey(
            detail.images, max_visible=source.kind.max_images
        )
        return DetailPageView(
            kind=kind,
            detail=detail_view(detail, source.kind),
            carousel=carousel_view(carousel),
        )
    finally:
        clear_contextvars()


@router.get("/conditions/{item_id}", response_model=DetailPageView, responses=_RESPONSES)
async def get_condition(
    item_id: str,
    app_state: AppState = Depends(get_app_state),
) -> DetailPageView:
    """Render one medical condition."""
    return await _record_page(app_state, CollectionName.CONDITIONS, item_id)


@router.get("/regions/{item_id}", response_model=DetailPageView, responses=_RESPONSES)
async def get_region(
    item_id: str,
    app_state: AppState = Depends(get_app_state),
) -> DetailPageView:
    """Render one geographic region."""
    return await _record_page(app_state, CollectionName.REGIONS, item_id)
