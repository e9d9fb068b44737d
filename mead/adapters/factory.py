"""Factory for collection sources.

Example:
    # Base URL taken from CONDITIONS_API_BASE_URL
    source = create_source("conditions")

    # Explicit base URL
    source = create_source("regions", base_url="http://localhost:8082")
"""

from __future__ import annotations

import os

import aiohttp

from mead.adapters.http_source import RemoteCollectionClient
from mead.core.kinds import CollectionKind, get_kind


def create_source(
    kind: str | CollectionKind,
    base_url: str | None = None,
    session: aiohttp.ClientSession | None = None,
) -> RemoteCollectionClient:
    """Create the HTTP source of a collection.

    Args:
        kind: Collection name ("conditions", "regions") or CollectionKind.
        base_url: Service base URL. Defaults to the kind's environment
            variable; a missing URL surfaces as ConfigurationError on first use.
        session: Optional shared aiohttp session.

    Raises:
        ValueError: If the collection name is unknown.
    """
    if isinstance(kind, str):
        kind = get_kind(kind)

    effective_base_url = base_url or os.environ.get(kind.base_url_env)
    return RemoteCollectionClient(kind, effective_base_url, session=session)
