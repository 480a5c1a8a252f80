"""Caches and their spawn/despawn lifecycle.

Every cell is either dormant (no cache) or active (holds a cache with a live coin
count). The :class:`CacheLifecycleManager` keeps the active set consistent with
the agent's visibility window:

- dormant -> active: the cell enters the window, passes the spawn gate and keeps
  the minimum spacing to every cache active at that moment. The starting coin
  count comes from the deterministic generator.
- active -> dormant: the cell leaves the window. Its coins are discarded; nothing
  about the cache is remembered.

A cell is only tried when it enters the window. While it stays visible it is not
tried again, even if it was rejected; leaving and re-entering rolls again.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from cachegrid.cachegrid_logging import create_module_logger, method_logger
from cachegrid.discrete_space import Cell, CellRegistry, Coin, window_offsets
from cachegrid.discrete_space.window import WindowShape
from cachegrid.generation import DeterministicGenerator, SpawnGate
from cachegrid.ledger import CoinLedger
from cachegrid.spacing import SpacingFilter

_logger = create_module_logger()

CacheId = str | tuple[int, int] | Cell


class Cache:
    """An active cache holding coins at a cell.

    Attributes:
        cell (Cell): the canonical cell owning the cache
        active (bool): False once the cache has been despawned

    Notes:
        ``collect`` and ``deposit`` are the interaction capability handed to the
        rendering side. They forward to the ledger the cache is bound to and turn
        into no-ops once the cache has been despawned.

    """

    __slots__ = ["_coin_count", "_ledger", "active", "cell"]

    def __init__(
        self, cell: Cell, coin_count: int, ledger: CoinLedger | None = None
    ) -> None:
        """Create a cache.

        Args:
            cell: the canonical cell owning the cache
            coin_count: starting number of coins, must not be negative
            ledger: ledger used by ``collect`` and ``deposit``
        """
        if coin_count < 0:
            raise ValueError(f"Coin count cannot be negative, got {coin_count}")
        self.cell = cell
        self._coin_count = int(coin_count)
        self._ledger = ledger
        self.active = True

    @property
    def key(self) -> str:
        """Identifier of the cache, ``"i:j"``."""
        return self.cell.key

    @property
    def coin_count(self) -> int:
        """Number of coins currently held."""
        return self._coin_count

    @property
    def coins(self) -> list[Coin]:
        """The coins currently held, with serials ``0 .. coin_count - 1``."""
        return self.cell.coins(self._coin_count)

    def _add(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot add a negative amount, got {amount}")
        self._coin_count += amount

    def _empty(self) -> int:
        amount, self._coin_count = self._coin_count, 0
        return amount

    def collect(self) -> int:
        """Move all coins into the agent's wallet; see :meth:`CoinLedger.collect`."""
        if not self.active:
            return 0
        return self._bound_ledger().collect(self)

    def deposit(self) -> int:
        """Move the agent's wallet into this cache; see :meth:`CoinLedger.deposit`."""
        if not self.active:
            return 0
        return self._bound_ledger().deposit(self)

    def _bound_ledger(self) -> CoinLedger:
        if self._ledger is None:
            raise RuntimeError(f"Cache {self.key} is not bound to a ledger")
        return self._ledger

    def __repr__(self):  # noqa: D105
        return f"Cache({self.key}, coins={self._coin_count})"


@dataclass(frozen=True)
class VisibilityUpdate:
    """Result of a single visibility pass.

    Attributes:
        center: the agent's cell
        visible: all cells of the new window, in enumeration order
        evaluated: cells that entered the window and were tried for spawning
        spawned: cells that became active
        despawned: cells that became dormant
    """

    center: Cell
    visible: tuple[Cell, ...]
    evaluated: tuple[Cell, ...] = ()
    spawned: frozenset[Cell] = field(default_factory=frozenset)
    despawned: frozenset[Cell] = field(default_factory=frozenset)


class CacheLifecycleManager:
    """Owns the set of active caches and keeps it in sync with the visibility window.

    Attributes:
        registry (CellRegistry): source of canonical cells
        radius (int): window radius in cells
        window_shape (str): "square" or "circle"
        spawn_gate (SpawnGate): probabilistic spawn test
        spacing_filter (SpacingFilter): minimum spacing test
        generator (DeterministicGenerator): source of starting coin counts
        ledger (CoinLedger | None): ledger new caches are bound to

    """

    def __init__(
        self,
        registry: CellRegistry,
        radius: int,
        spawn_gate: SpawnGate,
        spacing_filter: SpacingFilter,
        generator: DeterministicGenerator | None = None,
        ledger: CoinLedger | None = None,
        window_shape: WindowShape = "square",
    ) -> None:
        """Create a lifecycle manager.

        Args:
            registry: source of canonical cells
            radius: window radius in cells, must be a positive integer
            spawn_gate: probabilistic spawn test
            spacing_filter: minimum spacing test
            generator: source of starting coin counts, defaults to the gate's generator
            ledger: ledger the capability methods of new caches forward to
            window_shape: "square" (Chebyshev) or "circle" (Euclidean)
        """
        self._offsets = window_offsets(radius, window_shape)
        self.registry = registry
        self.radius = radius
        self.window_shape = window_shape
        self.spawn_gate = spawn_gate
        self.spacing_filter = spacing_filter
        self.generator = generator if generator is not None else spawn_gate.generator
        self.ledger = ledger

        self._caches: dict[tuple[int, int], Cache] = {}
        self._visible: dict[Cell, None] = {}  # ordered set of the current window

    @property
    def caches(self) -> dict[str, Cache]:
        """Active caches by key (a copy)."""
        return {cache.key: cache for cache in self._caches.values()}

    @property
    def active_cells(self) -> list[Cell]:
        """Cells of all active caches."""
        return [cache.cell for cache in self._caches.values()]

    @property
    def visible_cells(self) -> list[Cell]:
        """Cells of the current window, in enumeration order."""
        return list(self._visible)

    def window(self, center: Cell) -> list[Cell]:
        """Return the canonical cells of the window around ``center``."""
        canonicalize = self.registry.canonicalize
        return [canonicalize(center.i + di, center.j + dj) for di, dj in self._offsets]

    def get(self, cache_id: CacheId) -> Cache | None:
        """Return the active cache for ``cache_id``, or None if there is none.

        Args:
            cache_id: ``"i:j"`` string, ``(i, j)`` tuple or Cell
        """
        coordinate = _parse_cache_id(cache_id)
        if coordinate is None:
            return None
        return self._caches.get(coordinate)

    @method_logger(__name__)
    def update_visibility(
        self, position: Sequence[float] | np.ndarray
    ) -> VisibilityUpdate:
        """Spawn and despawn caches for the window around ``position``.

        Caches whose cell left the window are removed first, then every cell that
        entered the window is tried in enumeration order. Spacing is checked
        against all caches active at the time of the check, so caches admitted
        earlier in the same pass count.

        Args:
            position: the agent's continuous position

        Returns:
            VisibilityUpdate: the diff of this pass
        """
        center = self.registry.cell_for_point(position)
        window = self.window(center)
        in_window = set(window)

        despawned = [
            cache.cell for cache in self._caches.values() if cache.cell not in in_window
        ]
        for cell in despawned:
            self._despawn(cell)

        evaluated = []
        spawned = []
        for cell in window:
            if cell in self._visible or cell.coordinate in self._caches:
                continue
            evaluated.append(cell)
            if not self.spawn_gate(cell):
                continue
            if not self.spacing_filter.is_admissible(cell, self.active_cells):
                continue
            self._spawn(cell)
            spawned.append(cell)

        self._visible = dict.fromkeys(window)

        if spawned or despawned:
            _logger.debug(
                f"window at {center}: spawned {len(spawned)}, despawned {len(despawned)}, "
                f"active {len(self._caches)}"
            )
        return VisibilityUpdate(
            center=center,
            visible=tuple(window),
            evaluated=tuple(evaluated),
            spawned=frozenset(spawned),
            despawned=frozenset(despawned),
        )

    def clear(self) -> list[Cell]:
        """Despawn every cache and forget the current window.

        Returns:
            list[Cell]: the cells that were despawned
        """
        despawned = self.active_cells
        for cell in despawned:
            self._despawn(cell)
        self._visible = {}
        return despawned

    def _spawn(self, cell: Cell) -> Cache:
        cache = Cache(cell, self.generator.coin_count(cell), ledger=self.ledger)
        self._caches[cell.coordinate] = cache
        return cache

    def _despawn(self, cell: Cell) -> Cache | None:
        cache = self._caches.pop(cell.coordinate, None)
        if cache is not None:
            cache.active = False
        return cache

    def __contains__(self, cache_id: CacheId) -> bool:  # noqa: D105
        return self.get(cache_id) is not None

    def __len__(self) -> int:  # noqa: D105
        return len(self._caches)

    def __iter__(self):  # noqa: D105
        return iter(list(self._caches.values()))


def _parse_cache_id(cache_id: CacheId) -> tuple[int, int] | None:
    if isinstance(cache_id, Cell):
        return cache_id.coordinate
    if isinstance(cache_id, str):
        parts = cache_id.split(":")
        if len(parts) != 2:
            return None
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            return None
    if (
        isinstance(cache_id, tuple)
        and len(cache_id) == 2
        and all(
            isinstance(v, int | np.integer) and not isinstance(v, bool)
            for v in cache_id
        )
    ):
        return int(cache_id[0]), int(cache_id[1])
    return None
