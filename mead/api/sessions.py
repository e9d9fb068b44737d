"""In-memory store of explorer pages, one per browser session.

Each session owns its ExplorerPage exclusively. The store keeps at most
``max_sessions`` pages; opening one more closes the least recently used
page, which makes any of its in-flight detail fetches land as no-ops.
"""

from collections import OrderedDict
from typing import Any
from uuid import uuid4

from mead.core.explorer import ExplorerPage
from mead.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SESSIONS = 256


class ExplorerSessionStore:
    """LRU-bounded mapping of session id to ExplorerPage."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self._max_sessions = max_sessions
        self._pages: OrderedDict[str, ExplorerPage[Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._pages

    def add(self, page: ExplorerPage[Any]) -> str:
        """Register a page and return its new session id."""
        session_id = uuid4().hex
        self._pages[session_id] = page

        while len(self._pages) > self._max_sessions:
            evicted_id, evicted = self._pages.popitem(last=False)
            evicted.close()
            logger.info("session_evicted", session_id=evicted_id)

        return session_id

    def get(self, session_id: str, kind_name: str | None = None) -> ExplorerPage[Any]:
        """Look up the page of a session and mark it as recently used.

        Raises:
            KeyError: If the session does not exist or belongs to another
                collection.
        """
        page = self._pages[session_id]
        if kind_name is not None and page.kind.name != kind_name:
            raise KeyError(session_id)
        self._pages.move_to_end(session_id)
        return page

    def close(self, session_id: str) -> bool:
        """Close and forget a session. Returns False if it did not exist."""
        page = self._pages.pop(session_id, None)
        if page is None:
            return False
        page.close()
        return True

    def close_all(self) -> None:
        while self._pages:
            _, page = self._pages.popitem()
            page.close()
