"""Adaptive page size from measured layout.

The list panel should show as many rows as fit next to the detail card. The
front end measures the card, the pagination bar and the list rows and reports
them as LayoutMetrics; the estimator turns them into a page size and writes it
back only when it changed, so a re-render caused by the new page size does not
feed another update.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

from mead.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ROW_HEIGHT = 160.0


@dataclass(frozen=True)
class LayoutMetrics:
    """Measured heights of the explorer layout, in pixels.

    Attributes:
        container_height: Height of the reference container (the detail card).
        row_height: Height of one list row.
        row_gap: Vertical gap between two rows.
        pagination_height: Height of the pagination bar below the list.
        panel_gap: Gap between the list and the pagination bar.
    """

    container_height: float
    row_height: float = DEFAULT_ROW_HEIGHT
    row_gap: float = 0.0
    pagination_height: float = 0.0
    panel_gap: float = 0.0

    @property
    def available_height(self) -> float:
        return self.container_height - self.pagination_height - self.panel_gap


def estimate_page_size(metrics: LayoutMetrics) -> int | None:
    """Number of rows that fit in the available height.

    Returns:
        max(1, floor((available + gap) / (row + gap))), or None when the
        measurement is unusable (not finite, no row height or no room at all).
    """
    available = metrics.available_height
    if not (math.isfinite(available) and math.isfinite(metrics.row_height)):
        return None
    if metrics.row_height <= 0 or available <= 0:
        return None
    row_gap = max(0.0, metrics.row_gap) if math.isfinite(metrics.row_gap) else 0.0
    return max(1, math.floor((available + row_gap) / (metrics.row_height + row_gap)))


class PageSizeEstimator:
    """Feeds measured page sizes into a query.

    Args:
        read: Returns the current page size.
        write: Stores a new page size.
        adaptive: When False the estimator ignores measurements and the page
            size stays at its configured value.
    """

    def __init__(
        self,
        read: Callable[[], int],
        write: Callable[[int], None],
        adaptive: bool = True,
    ) -> None:
        self._read = read
        self._write = write
        self._adaptive = adaptive

    @property
    def adaptive(self) -> bool:
        return self._adaptive

    def observe(self, metrics: LayoutMetrics) -> int | None:
        """Recompute the page size for a new measurement.

        Returns:
            The page size written back, or None when nothing changed.
        """
        if not self._adaptive:
            return None

        fit_count = estimate_page_size(metrics)
        if fit_count is None:
            logger.debug("layout_measurement_ignored", metrics=metrics)
            return None

        current = self._read()
        if fit_count == current:
            return None

        self._write(fit_count)
        logger.debug("page_size_changed", previous=current, page_size=fit_count)
        return fit_count
