"""Responsive grid sizing: fit the longest year row exactly into the container."""

import logging

from cbb_explorer.config import LayoutConfig

logger = logging.getLogger(__name__)


def compute_cell_size(
    container_width: float,
    row_cardinality: int,
    fixed_overhead: float,
    gap: float,
) -> float | None:
    """Edge length so that n cells plus n-1 gaps fill the width exactly.

    Not rounded. Returns None when there is no row to fit.
    """
    if row_cardinality < 1:
        return None
    available = container_width - fixed_overhead
    return (available - (row_cardinality - 1) * gap) / row_cardinality


class GridSizer:
    """Holds the current cell size and decides whether a new measurement replaces it."""

    def __init__(self, layout: LayoutConfig | None = None, initial: float | None = None) -> None:
        self.layout = layout or LayoutConfig()
        self.size: float = initial if initial is not None else self.layout.initial_cell_size

    def update(self, container_width: float, row_cardinality: int) -> bool:
        """Re-derive the size. Returns True only when the stored size changed."""
        if container_width <= 0:
            logger.debug("Container not rendered yet (width=%s), skipping", container_width)
            return False

        size = compute_cell_size(
            container_width, row_cardinality, self.layout.fixed_overhead, self.layout.gap,
        )
        if size is None:
            return False
        if size < self.layout.min_cell_size:
            logger.debug(
                "Cell size %.3f below %.1f floor, keeping %.3f",
                size, self.layout.min_cell_size, self.size,
            )
            return False
        if abs(size - self.size) <= self.layout.min_size_delta:
            return False

        logger.debug(
            "Cell size %.3f -> %.3f (width=%s, n=%d)",
            self.size, size, container_width, row_cardinality,
        )
        self.size = size
        return True
