"""Explorer session routes.

A session is one open list/detail page over a collection. Every mutating
route returns the full ExplorerView so a front end can re-render from it.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mead.api.dependencies import AppState, get_app_state
from mead.api.presentation import explorer_view
from mead.api.schemas import (
    CarouselAction,
    CollectionName,
    ErrorResponse,
    ExplorerView,
    LayoutReport,
    PageSizeResponse,
    QueryUpdate,
    SelectRequest,
    SessionCreate,
)
from mead.core.explorer import ExplorerPage
from mead.core.logging import bind_contextvars, clear_contextvars, get_logger
from mead.core.page_size import LayoutMetrics

logger = get_logger(__name__)

router = APIRouter(prefix="/explorer/{kind}/sessions", tags=["explorer"])

_NOT_FOUND = {"model": ErrorResponse, "description": "Session not found"}


async def get_session_page(
    kind: CollectionName,
    session_id: str,
    app_state: AppState = Depends(get_app_state),
) -> AsyncGenerator[ExplorerPage[Any], None]:
    """Resolve the explorer page of a session and bind it to the log context."""
    try:
        page = app_state.sessions.get(session_id, kind.value)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Session not found", "session_id": session_id},
        ) from None

    bind_contextvars(session_id=session_id, collection=kind.value)
    try:
        yield page
    finally:
        clear_contextvars()


def _invalid(ex: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error": "Invalid request", "detail": str(ex)},
    )


@router.post(
    "",
    response_model=ExplorerView,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Session opened and collection loaded"},
        422: {"model": ErrorResponse, "description": "Invalid filter"},
    },
)
async def open_session(
    kind: CollectionName,
    request: SessionCreate,
    app_state: AppState = Depends(get_app_state),
) -> ExplorerView:
    """Open an explorer page and load its collection.

    A collection that fails to load still opens the session; the failure is
    reported in ``listing.error``.
    """
    try:
        page = app_state.new_page(kind.value, page_size=request.page_size)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "Collection not available", "code": "CONFIGURATION"},
        ) from None

    try:
        await page.set_type_filter(request.type)
        await page.set_search(request.search)
    except ValueError as ex:
        page.close()
        raise _invalid(ex) from ex

    await page.load()
    session_id = app_state.sessions.add(page)
    logger.info(
        "session_opened",
        session_id=session_id,
        collection=kind.value,
        items=len(page.items),
    )
    return explorer_view(session_id, page)


@router.get(
    "/{session_id}",
    response_model=ExplorerView,
    responses={404: _NOT_FOUND},
)
async def get_session(
    session_id: str,
    page: ExplorerPage[Any] = Depends(get_session_page),
) -> ExplorerView:
    """Current state of an explorer page."""
    return explorer_view(session_id, page)


@router.patch(
    "/{session_id}/query",
    response_model=ExplorerView,
    responses={
        404: _NOT_FOUND,
        422: {"model": ErrorResponse, "description": "Invalid filter"},
    },
)
async def update_query(
    session_id: str,
    request: QueryUpdate,
    page: ExplorerPage[Any] = Depends(get_session_page),
) -> ExplorerView:
    """Change the search term, type filter or current page."""
    try:
        if request.type is not None:
            await page.set_type_filter(request.type)
        if request.search is not None:
            await page.set_search(request.search)
    except ValueError as ex:
        raise _invalid(ex) from ex

    if request.page is not None:
        page.set_page(request.page)
    if request.step == "next":
        page.next_page()
    elif request.step == "prev":
        page.prev_page()

    logger.debug(
        "query_updated",
        search=page.query.search_term,
        type_filter=page.query.type_filter,
        page_number=page.view.page_number,
    )
    return explorer_view(session_id, page)


@router.post(
    "/{session_id}/select",
    response_model=ExplorerView,
    responses={
        404: {"model": ErrorResponse, "description": "Session or item not found"},
    },
)
async def select_item(
    session_id: str,
    request: SelectRequest,
    page: ExplorerPage[Any] = Depends(get_session_page),
) -> ExplorerView:
    """Select an item of the filtered list and load its detail record."""
    try:
        await page.select(request.id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Item not in current results", "id": request.id},
        ) from None
    return explorer_view(session_id, page)


@router.post(
    "/{session_id}/carousel",
    response_model=ExplorerView,
    responses={
        404: _NOT_FOUND,
        422: {"model": ErrorResponse, "description": "Missing action argument"},
    },
)
async def carousel_action(
    session_id: str,
    request: CarouselAction,
    page: ExplorerPage[Any] = Depends(get_session_page),
) -> ExplorerView:
    """Navigate the image carousel of the selected record."""
    action = request.action
    if action == "next":
        page.next_image()
    elif action == "prev":
        page.prev_image()
    elif action == "goto":
        if request.index is None:
            raise _invalid(ValueError("goto needs an index"))
        page.go_to_image(request.index)
    elif action == "swipe":
        if request.displacement is None:
            raise _invalid(ValueError("swipe needs a displacement"))
        page.swipe(request.displacement)
    elif action == "swipe_start":
        if request.x is None:
            raise _invalid(ValueError("swipe_start needs x"))
        page.begin_swipe(request.x)
    elif action == "swipe_end":
        if request.x is None:
            raise _invalid(ValueError("swipe_end needs x"))
        page.end_swipe(request.x)
    else:
        if not request.url:
            raise _invalid(ValueError("image_error needs a url"))
        page.report_image_failure(request.url)

    return explorer_view(session_id, page)


@router.post(
    "/{session_id}/layout",
    response_model=PageSizeResponse,
    responses={404: _NOT_FOUND},
)
async def report_layout(
    session_id: str,
    request: LayoutReport,
    page: ExplorerPage[Any] = Depends(get_session_page),
) -> PageSizeResponse:
    """Feed a layout measurement to the adaptive page size."""
    new_size = page.observe_layout(
        LayoutMetrics(
            container_height=request.container_height,
            row_height=request.row_height,
            row_gap=request.row_gap,
            pagination_height=request.pagination_height,
            panel_gap=request.panel_gap,
        )
    )
    return PageSizeResponse(
        page_size=page.query.page_size,
        changed=new_size is not None,
        view=explorer_view(session_id, page),
    )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: _NOT_FOUND},
)
async def close_session(
    kind: CollectionName,
    session_id: str,
    page: ExplorerPage[Any] = Depends(get_session_page),
    app_state: AppState = Depends(get_app_state),
) -> Response:
    """Close an explorer page. Detail fetches still in flight are discarded."""
    app_state.sessions.close(session_id)
    logger.info("session_closed", session_id=session_id, collection=kind.value)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
