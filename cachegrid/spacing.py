"""Minimum-distance admission of new caches."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from cachegrid.discrete_space import Cell
from cachegrid.errors import ConfigurationError


class SpacingFilter:
    """Rejects candidate cells that are too close to an active cache.

    Distances are Euclidean in grid-index space, multiplied by ``cell_size`` so
    that ``min_spacing`` can be given in position units.

    Attributes:
        min_spacing (float): smallest allowed distance between two active caches
        cell_size (float): length of one index step

    """

    def __init__(self, min_spacing: float, cell_size: float = 1.0) -> None:
        """Create a spacing filter.

        Args:
            min_spacing: smallest allowed distance, 0 disables the filter
            cell_size: length of one index step in the units of ``min_spacing``
        """
        if not min_spacing >= 0:
            raise ConfigurationError("min_spacing", "must be zero or positive")
        if not cell_size > 0:
            raise ConfigurationError("cell_size", "must be positive")
        self.min_spacing = float(min_spacing)
        self.cell_size = float(cell_size)

    def distance(self, a: Cell, b: Cell) -> float:
        """Return the scaled Euclidean distance between two cells."""
        return float(np.hypot(a.i - b.i, a.j - b.j) * self.cell_size)

    def is_admissible(self, candidate: Cell, active_cells: Iterable[Cell]) -> bool:
        """Return whether ``candidate`` keeps the minimum spacing to all active cells.

        Args:
            candidate: cell that wants to spawn a cache
            active_cells: cells of the currently active caches

        Returns:
            bool: False if any active cell is strictly closer than ``min_spacing``
        """
        coords = np.array([c.coordinate for c in active_cells], dtype=float)
        if coords.size == 0 or self.min_spacing == 0:
            return True

        deltas = coords - np.array(candidate.coordinate, dtype=float)
        distances = np.hypot(deltas[:, 0], deltas[:, 1]) * self.cell_size
        return bool(np.all(distances >= self.min_spacing))

    def __repr__(self):  # noqa: D105
        return (
            f"SpacingFilter(min_spacing={self.min_spacing}, cell_size={self.cell_size})"
        )
