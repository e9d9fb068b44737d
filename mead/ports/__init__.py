"""Ports (interfaces) for the explorer.

Protocol definitions for the boundary between the explorer core and the
remote MeAd services.
"""

from mead.ports.sources import CollectionSource

__all__ = [
    "CollectionSource",
]
