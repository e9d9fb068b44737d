"""Mock implementation of the CollectionSource protocol for testing.

The mock serves an in-memory collection and detail records. Detail fetches
can be held open per id with hold() and released with release(), which lets
tests interleave a slow and a fast response deterministically.

Features:
- Configurable items and detail records
- Call tracking for assertions (collection_calls, detail_calls)
- Error injection for the list and for single detail records
- Gated detail responses for race tests
"""

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

from mead.core.errors import ExplorerError, TransportError
from mead.core.kinds import CONDITIONS, CollectionKind
from mead.core.records import CollectionItem


class MockCollectionSource:
    """Mock implementation of the CollectionSource protocol.

    Attributes:
        items: Items returned by fetch_collection().
        details: Detail record per id returned by fetch_detail().
        collection_error: Raised by fetch_collection() when set.
        detail_errors: Raised by fetch_detail() for the given ids.
        collection_calls: Number of fetch_collection() calls.
        detail_calls: Ids passed to fetch_detail(), in call order.

    Example:
        >>> source = MockCollectionSource(items, details)
        >>> source.hold("a")
        >>> task = asyncio.create_task(page.select("a"))
        >>> ...
        >>> source.release("a")
    """

    def __init__(
        self,
        items: Sequence[CollectionItem] = (),
        details: Mapping[str, Any] | None = None,
        kind: CollectionKind = CONDITIONS,
    ) -> None:
        self.items = list(items)
        self.details = dict(details or {})
        self.collection_error: ExplorerError | None = None
        self.detail_errors: dict[str, ExplorerError] = {}
        self.collection_calls = 0
        self.detail_calls: list[str] = []
        self.configured = True
        self._kind = kind
        self._gates: dict[str, asyncio.Event] = {}

    @property
    def kind(self) -> CollectionKind:
        return self._kind

    @property
    def is_configured(self) -> bool:
        return self.configured

    def hold(self, item_id: str) -> None:
        """Make fetch_detail(item_id) wait until release(item_id)."""
        self._gates[item_id] = asyncio.Event()

    def release(self, item_id: str) -> None:
        self._gates.pop(item_id).set()

    async def fetch_collection(self) -> list[CollectionItem]:
        self.collection_calls += 1
        await asyncio.sleep(0)
        if self.collection_error is not None:
            raise self.collection_error
        return list(self.items)

    async def fetch_detail(self, item_id: str) -> Any:
        self.detail_calls.append(item_id)
        gate = self._gates.get(item_id)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)

        if item_id in self.detail_errors:
            raise self.detail_errors[item_id]
        if item_id not in self.details:
            raise TransportError(404, "Not Found")
        return self.details[item_id]
