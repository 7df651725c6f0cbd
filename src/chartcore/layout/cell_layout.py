"""Leaf band positions along an axis, accounting for group gaps."""

from __future__ import annotations

import numpy as np


class BandLayout:
    """Splits an axis extent into equal bands, one per leaf.

    Gaps insert extra whitespace before the given leaf indices (e.g. at
    level-0 span boundaries). The band size is whatever remains of the
    extent once the gaps are paid for.
    """

    def __init__(
        self,
        n_cells: int,
        extent: float,
        offset: float = 0.0,
        gap_positions: frozenset[int] = frozenset(),
        gap_size: float = 0.0,
    ) -> None:
        self._n_cells = n_cells
        self._gap_positions = frozenset(p for p in gap_positions if 0 < p < n_cells)
        self._gap_size = gap_size
        self._offset = offset
        gap_total = len(self._gap_positions) * gap_size
        if n_cells > 0:
            self._band_size = max(0.0, (extent - gap_total) / n_cells)
        else:
            self._band_size = 0.0
        self._positions = self._compute_positions()

    def _compute_positions(self) -> np.ndarray:
        """Compute the pixel start position of each band."""
        positions = np.empty(self._n_cells, dtype=np.float64)
        current = self._offset
        for i in range(self._n_cells):
            if i in self._gap_positions:
                current += self._gap_size
            positions[i] = current
            current += self._band_size
        return positions

    @property
    def positions(self) -> np.ndarray:
        """Pixel start positions for each band."""
        return self._positions

    @property
    def centers(self) -> np.ndarray:
        return self._positions + self._band_size / 2

    @property
    def band_size(self) -> float:
        return self._band_size

    @property
    def total_size(self) -> float:
        """Total pixel span including all bands and gaps."""
        if self._n_cells == 0:
            return 0.0
        return float(self._positions[-1] + self._band_size - self._offset)

    def span_extent(self, start: int, end: int) -> tuple[float, float]:
        """Pixel (start, end) covered by the inclusive leaf range [start, end]."""
        return (
            float(self._positions[start]),
            float(self._positions[end] + self._band_size),
        )

    def pixel_to_index(self, pixel: float) -> int | None:
        """Map a pixel coordinate to a band index via binary search.

        Returns None if the pixel falls in a gap or outside the axis.
        """
        if self._n_cells == 0:
            return None
        idx = int(np.searchsorted(self._positions, pixel, side="right")) - 1
        if idx < 0 or idx >= self._n_cells:
            return None
        if pixel < self._positions[idx] + self._band_size:
            return idx
        return None

    def to_list(self) -> list[float]:
        """Serialize positions as a list for JSON transfer."""
        return self._positions.tolist()
