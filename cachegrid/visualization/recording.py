"""Headless renderer that records what would be displayed."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cachegrid.caches import Cache
    from cachegrid.discrete_space import Cell
    from cachegrid.discrete_space.registry import Bounds


class RecordingRenderer:
    """Renderer keeping the currently displayed caches and a log of calls.

    Attributes:
        caches: displayed caches by key
        bounds: bounds of each displayed cache by key
        events: ``(call, key)`` pairs in call order, e.g. ``("add", "3:4")``
        position: last player position
        trail: last player trail
        wallet: last displayed wallet balance
    """

    def __init__(self) -> None:  # noqa: D107
        self.caches: dict[str, Cache] = {}
        self.bounds: dict[str, Bounds] = {}
        self.events: list[tuple[str, str]] = []
        self.position: tuple[float, float] | None = None
        self.trail: list[tuple[float, float]] = []
        self.wallet: int | None = None

    def add_cache(self, cache: Cache, bounds: Bounds) -> None:  # noqa: D102
        self.caches[cache.key] = cache
        self.bounds[cache.key] = bounds
        self.events.append(("add", cache.key))

    def remove_cache(self, cell: Cell) -> None:  # noqa: D102
        self.caches.pop(cell.key, None)
        self.bounds.pop(cell.key, None)
        self.events.append(("remove", cell.key))

    def update_cache(self, cache: Cache) -> None:  # noqa: D102
        self.events.append(("update", cache.key))

    def update_player(
        self, position: tuple[float, float], trail: Sequence[tuple[float, float]]
    ) -> None:  # noqa: D102
        self.position = position
        self.trail = list(trail)

    def update_status(self, wallet: int) -> None:  # noqa: D102
        self.wallet = wallet
