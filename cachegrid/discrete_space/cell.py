"""Grid addresses and the coins that live in them.

Cells are lightweight value objects identified by their ``(i, j)`` index pair.
They are meant to be obtained through a :class:`~cachegrid.discrete_space.registry.CellRegistry`,
which hands out a single canonical instance per index pair, so code holding two
cells can compare them with ``is`` before falling back to ``==``.
"""

from __future__ import annotations

from typing import NamedTuple


class Coin(NamedTuple):
    """A single coin belonging to the cache at cell ``(i, j)``.

    Attributes:
        i: row index of the owning cell
        j: column index of the owning cell
        serial: zero-based sequence number, unique within the owning cache
    """

    i: int
    j: int
    serial: int

    def __str__(self):  # noqa: D105
        return f"{self.i}:{self.j}#{self.serial}"


class Cell:
    """A cell in the unbounded 2D grid.

    Attributes:
        i (int): index along the first axis
        j (int): index along the second axis

    """

    __slots__ = ["i", "j"]

    def __init__(self, i: int, j: int) -> None:
        """Initialise the cell.

        Args:
            i: index along the first axis
            j: index along the second axis
        """
        self.i = int(i)
        self.j = int(j)

    @property
    def coordinate(self) -> tuple[int, int]:
        """The ``(i, j)`` index pair of the cell."""
        return (self.i, self.j)

    @property
    def key(self) -> str:
        """String identifier of the cell, ``"i:j"``."""
        return f"{self.i}:{self.j}"

    def coins(self, count: int) -> list[Coin]:
        """Return ``count`` coins with consecutive serials belonging to this cell."""
        return [Coin(self.i, self.j, serial) for serial in range(count)]

    def __eq__(self, other):  # noqa: D105
        if self is other:
            return True
        if not isinstance(other, Cell):
            return NotImplemented
        return self.i == other.i and self.j == other.j

    def __hash__(self):  # noqa: D105
        return hash((self.i, self.j))

    def __repr__(self):  # noqa: D105
        return f"Cell({self.i}, {self.j})"
