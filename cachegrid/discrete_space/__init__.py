"""Cell-based description of the unbounded cache grid.

This package provides the grid-side building blocks:

- Cell: a grid address with value semantics
- Coin: a single coin owned by the cache at a cell
- CellRegistry: the flyweight store handing out one canonical cell per address
- window_offsets: index offsets covered by a square or circular visibility window

Cells are never constructed directly by other components; they are always
requested from the registry so the same address always yields the same object.
"""

from cachegrid.discrete_space.cell import Cell, Coin
from cachegrid.discrete_space.registry import CellRegistry
from cachegrid.discrete_space.window import WINDOW_SHAPES, window_offsets

__all__ = [
    "WINDOW_SHAPES",
    "Cell",
    "CellRegistry",
    "Coin",
    "window_offsets",
]
