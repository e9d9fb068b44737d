"""Mock implementations for testing."""

from tests.mocks.sources import MockCollectionSource

__all__ = ["MockCollectionSource"]
