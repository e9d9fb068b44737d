"""Adapters for external systems.

Implementations of the collection source protocol for the MeAd services.
"""

from mead.adapters.factory import create_source
from mead.adapters.http_source import RemoteCollectionClient

__all__ = [
    "RemoteCollectionClient",
    "create_source",
]
