"""Collection source protocol.

A collection source is the read-only boundary between the explorer core and
a MeAd service. The HTTP adapter in mead.adapters implements it; tests use
in-process doubles.
"""

from typing import Protocol, TypeVar

from mead.core.kinds import CollectionKind
from mead.core.records import CollectionItem

D_co = TypeVar("D_co", covariant=True)


class CollectionSource(Protocol[D_co]):
    """Protocol for a remote collection with lazily loaded detail records.

    Both operations are idempotent reads. Implementations raise
    ConfigurationError when they cannot reach a configured service and
    TransportError for any failed or undecodable response; they never
    return an empty result in place of an error.
    """

    @property
    def kind(self) -> CollectionKind:
        """The collection this source reads."""
        ...

    @property
    def is_configured(self) -> bool:
        """Whether the service URL is set. Fetches raise ConfigurationError if not."""
        ...

    async def fetch_collection(self) -> list[CollectionItem]:
        """Fetch every item of the collection."""
        ...

    async def fetch_detail(self, item_id: str) -> D_co:
        """Fetch the detail record of one item."""
        ...
