"""Protocols for the collaborators a cache world talks to.

This module provides structural interfaces for everything outside the core
cache lifecycle:

- ``CacheRenderer``: draws caches, the player and the status display
- ``StateStore``: loads and saves the agent state
- ``PositionSource``: produces discrete position updates

Any object with the right methods satisfies a protocol; nothing has to inherit
from these classes. The package ships implementations of each
(``cachegrid.visualization``, ``cachegrid.state``, ``cachegrid.movement``),
but a world accepts any object that fits.

Examples:
    A renderer that only prints::

        class PrintRenderer:
            def add_cache(self, cache, bounds):
                print("add", cache.key, cache.coin_count)

            def remove_cache(self, cell):
                print("remove", cell.key)

            def update_cache(self, cache):
                print("update", cache.key, cache.coin_count)

            def update_player(self, position, trail):
                print("player at", position)

            def update_status(self, wallet):
                print(f"{wallet} coins")

        world = CacheWorld(renderer=PrintRenderer())
        assert isinstance(world.renderer, CacheRenderer)

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from cachegrid.caches import Cache
    from cachegrid.discrete_space import Cell
    from cachegrid.discrete_space.registry import Bounds
    from cachegrid.state import AgentState

# Type alias for continuous positions.
# - tuple[float, float] for plain positions
# - NDArray[np.floating] for positions computed with numpy
PositionLike = tuple[float, float] | Sequence[float] | NDArray[np.floating]


@runtime_checkable
class CacheRenderer(Protocol):
    """Protocol for anything that displays the world.

    The renderer holds no game logic. To let a user interact with a cache it binds
    its UI events to ``cache.collect()`` and ``cache.deposit()``.
    """

    def add_cache(self, cache: Cache, bounds: Bounds) -> None:
        """Show a newly spawned cache covering ``bounds``."""
        ...

    def remove_cache(self, cell: Cell) -> None:
        """Remove the representation of the cache at ``cell``."""
        ...

    def update_cache(self, cache: Cache) -> None:
        """Refresh a cache whose coin count changed."""
        ...

    def update_player(
        self, position: tuple[float, float], trail: Sequence[tuple[float, float]]
    ) -> None:
        """Move the player marker and extend the trail."""
        ...

    def update_status(self, wallet: int) -> None:
        """Show the current wallet balance."""
        ...


@runtime_checkable
class StateStore(Protocol):
    """Protocol for persistence of the agent state.

    ``load_agent_state`` must not fail: when there is no usable stored state it
    returns a fresh one. ``save_agent_state`` may raise; the world logs such
    failures and carries on with its in-memory state.
    """

    def load_agent_state(self) -> AgentState:
        """Return the stored agent state, or a fresh one."""
        ...

    def save_agent_state(self, state: AgentState) -> None:
        """Store ``state``."""
        ...


@runtime_checkable
class PositionSource(Protocol):
    """Protocol for producers of discrete position updates."""

    def __iter__(self) -> Iterator[PositionLike]:
        """Yield positions in the order the agent reaches them."""
        ...
