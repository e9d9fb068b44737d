"""FastAPI dependency injection for sources and explorer sessions.

Example:
    from fastapi import Depends
    from mead.api.dependencies import AppState, get_app_state

    @router.get("/something")
    async def handler(state: AppState = Depends(get_app_state)):
        source = state.source("conditions")
"""

from collections.abc import Mapping
from typing import Any

import aiohttp

from mead.adapters import create_source
from mead.api.sessions import DEFAULT_MAX_SESSIONS, ExplorerSessionStore
from mead.core.explorer import ExplorerPage
from mead.core.kinds import KINDS
from mead.core.logging import get_logger
from mead.core.pagination import DEFAULT_PAGE_SIZE
from mead.ports.sources import CollectionSource

logger = get_logger(__name__)


class AppState:
    """Application state container for shared resources.

    Holds one collection source per collection, the explorer sessions and
    the page size defaults new explorer pages start with.
    """

    def __init__(self) -> None:
        self._sources: dict[str, CollectionSource[Any]] = {}
        self._sessions: ExplorerSessionStore | None = None
        self._http_session: aiohttp.ClientSession | None = None
        self._page_size = DEFAULT_PAGE_SIZE
        self._adaptive_page_size = True
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(
        self,
        conditions_base_url: str | None = None,
        geography_base_url: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        adaptive_page_size: bool = True,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        """Create the HTTP sources and the session store.

        Args:
            conditions_base_url: Conditions service URL (or None to use env var).
            geography_base_url: Geography service URL (or None to use env var).
            page_size: Page size new explorer pages start with.
            adaptive_page_size: Whether pages follow layout measurements.
            max_sessions: Maximum number of open explorer sessions.
        """
        if self._initialized:
            logger.warning("app_state_already_initialized")
            return

        self._http_session = aiohttp.ClientSession()
        sources = {
            "conditions": create_source(
                "conditions", conditions_base_url, session=self._http_session
            ),
            "regions": create_source(
                "regions", geography_base_url, session=self._http_session
            ),
        }
        for name, source in sources.items():
            if not source.is_configured:
                logger.warning(
                    "source_not_configured",
                    collection=name,
                    setting=source.kind.base_url_env,
                )

        self.configure(
            sources,
            page_size=page_size,
            adaptive_page_size=adaptive_page_size,
            max_sessions=max_sessions,
        )

    def configure(
        self,
        sources: Mapping[str, CollectionSource[Any]],
        page_size: int = DEFAULT_PAGE_SIZE,
        adaptive_page_size: bool = True,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        """Install already built sources.

        Raises:
            ValueError: If a source is registered under an unknown name.
        """
        unknown = set(sources) - set(KINDS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")

        self._sources = dict(sources)
        self._sessions = ExplorerSessionStore(max_sessions)
        self._page_size = page_size
        self._adaptive_page_size = adaptive_page_size
        self._initialized = True
        logger.info(
            "app_state_initialized",
            collections=sorted(self._sources),
            page_size=page_size,
            adaptive_page_size=adaptive_page_size,
            max_sessions=max_sessions,
        )

    async def shutdown(self) -> None:
        """Close every session and the shared HTTP session."""
        if self._sessions is not None:
            self._sessions.close_all()
        if self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._initialized = False
        logger.info("app_state_shutdown")

    @property
    def sessions(self) -> ExplorerSessionStore:
        if self._sessions is None:
            raise RuntimeError("App state not initialized")
        return self._sessions

    @property
    def sources(self) -> dict[str, CollectionSource[Any]]:
        if not self._initialized:
            raise RuntimeError("App state not initialized")
        return dict(self._sources)

    def source(self, name: str) -> CollectionSource[Any]:
        """Get the source of a collection.

        Raises:
            RuntimeError: If the app state is not initialized.
            KeyError: If no source is registered for the collection.
        """
        if not self._initialized:
            raise RuntimeError("App state not initialized")
        return self._sources[name]

    def new_page(self, name: str, page_size: int | None = None) -> ExplorerPage[Any]:
        """Build an explorer page over one collection."""
        return ExplorerPage(
            self.source(name),
            page_size=page_size or self._page_size,
            adaptive_page_size=self._adaptive_page_size,
        )


# Global app state instance
_app_state = AppState()


def get_app_state() -> AppState:
    """Get the global app state instance."""
    return _app_state

