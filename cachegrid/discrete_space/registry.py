"""Flyweight store of canonical grid cells.

The grid is unbounded, so cells are not created up front the way a fixed-size
grid would create them. Instead the registry creates a cell the first time its
index pair is asked for and hands out that same instance on every later request.
Anything that needs a cell (window enumeration, point lookup, cache ownership)
goes through :meth:`CellRegistry.canonicalize`.

Positions are continuous ``(x, y)`` pairs. A position maps to the cell
``(floor(x / tile_width), floor(y / tile_width))``, anchored at the origin.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterator, Sequence

import numpy as np

from cachegrid.cachegrid_logging import create_module_logger
from cachegrid.discrete_space.cell import Cell
from cachegrid.errors import ConfigurationError

_logger = create_module_logger()

Bounds = tuple[tuple[float, float], tuple[float, float]]


class CellRegistry:
    """Registry handing out one canonical :class:`Cell` per index pair.

    Attributes:
        tile_width (float): side length of a cell in position units
        max_cells (int | None): optional bound on the number of stored cells

    Notes:
        Without ``max_cells`` the registry grows for as long as it lives, which is
        fine for a play session. With ``max_cells`` the least recently requested
        cells are dropped once the bound is exceeded. Since every visibility update
        requests all cells of the window, the cells that survive are the ones that
        were most recently inside a window. Dropping a cell only loses sharing: a
        later request creates a fresh instance that is still equal to the old one.

    """

    def __init__(self, tile_width: float = 1.0, max_cells: int | None = None) -> None:
        """Create a registry.

        Args:
            tile_width: side length of a cell in position units
            max_cells: maximum number of canonical cells to keep, or None for no bound
        """
        if not tile_width > 0:
            raise ConfigurationError("tile_width", "must be a positive number")
        if max_cells is not None and (not isinstance(max_cells, int) or max_cells < 1):
            raise ConfigurationError("max_cells", "must be a positive integer or None")

        self.tile_width = float(tile_width)
        self.max_cells = max_cells
        self._cells: OrderedDict[tuple[int, int], Cell] = OrderedDict()

    def canonicalize(self, i: int, j: int) -> Cell:
        """Return the canonical cell for ``(i, j)``, creating it if needed.

        Args:
            i: index along the first axis
            j: index along the second axis

        Returns:
            Cell: the same instance for every call with equal indices
        """
        key = (int(i), int(j))
        try:
            cell = self._cells[key]
        except KeyError:
            cell = Cell(*key)
            self._cells[key] = cell
            if self.max_cells is not None and len(self._cells) > self.max_cells:
                evicted, _ = self._cells.popitem(last=False)
                _logger.debug(f"evicted cell {evicted} from registry")
            return cell

        if self.max_cells is not None:
            self._cells.move_to_end(key)
        return cell

    def cell_for_point(self, position: Sequence[float] | np.ndarray) -> Cell:
        """Return the canonical cell containing ``position``.

        Args:
            position: continuous ``(x, y)`` position

        Returns:
            Cell: the cell whose bounds contain the position
        """
        coord = np.floor(np.asarray(position, dtype=float) / self.tile_width).astype(
            int
        )
        if coord.shape != (2,):
            raise ValueError(f"Position must have exactly 2 components, got {position}")
        return self.canonicalize(coord[0], coord[1])

    def cell_bounds(self, cell: Cell) -> Bounds:
        """Return the south-west and north-east corners of ``cell``."""
        w = self.tile_width
        return (cell.i * w, cell.j * w), ((cell.i + 1) * w, (cell.j + 1) * w)

    def cell_center(self, cell: Cell) -> tuple[float, float]:
        """Return the position at the center of ``cell``."""
        w = self.tile_width
        return ((cell.i + 0.5) * w, (cell.j + 0.5) * w)

    def __len__(self) -> int:  # noqa: D105
        return len(self._cells)

    def __contains__(self, key: tuple[int, int]) -> bool:  # noqa: D105
        return tuple(key) in self._cells

    def __iter__(self) -> Iterator[Cell]:  # noqa: D105
        return iter(list(self._cells.values()))

    def __repr__(self):  # noqa: D105
        return (
            f"CellRegistry(tile_width={self.tile_width}, "
            f"max_cells={self.max_cells}, size={len(self)})"
        )
