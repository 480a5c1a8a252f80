"""The world class for cachegrid.

Core Objects: CacheWorld
"""

# Postpone annotation evaluation to avoid NameError from forward references (PEP 563). Remove once Python 3.14+ is required.
from __future__ import annotations

from typing import Any

import numpy as np

from cachegrid.cachegrid_logging import create_module_logger, method_logger
from cachegrid.caches import Cache, CacheId, CacheLifecycleManager, VisibilityUpdate
from cachegrid.discrete_space import CellRegistry
from cachegrid.errors import ConfigurationError, PersistenceError, ScenarioLockedError
from cachegrid.generation import DeterministicGenerator, SpawnGate
from cachegrid.ledger import CoinLedger, Wallet
from cachegrid.movement import step_position
from cachegrid.protocols import CacheRenderer, PositionLike, PositionSource, StateStore
from cachegrid.scenario import WorldScenario
from cachegrid.spacing import SpacingFilter
from cachegrid.state import AgentState, InMemoryStateStore

_cachegrid_logger = create_module_logger()


class CacheWorld:
    """A single agent exploring an unbounded grid of coin caches.

    The world wires the core components together and is the entry point for the
    outside: position sources call ``on_agent_move``, renderers bind UI events to
    the caches' ``collect``/``deposit`` capability (or to the world's methods of
    the same name) and a store persists the agent state.

    Attributes:
        scenario: the scenario with the world's parameters, locked once bound
        registry: the canonical cell registry shared by all components
        generator: deterministic source of spawn rolls and coin counts
        spawn_gate: the probabilistic spawn test
        spacing_filter: minimum spacing test for new caches
        ledger: coin transfers between wallet and caches
        lifecycle: the active caches and the visibility window
        store: persistence collaborator
        renderer: rendering collaborator, or None for a headless world

    Notes:
        The in-memory agent state is the source of truth. The state is saved
        after every move, every non-zero transfer and every reset; a failing save
        is logged and otherwise ignored.

    """

    @method_logger(__name__)
    def __init__(
        self,
        scenario: WorldScenario | None = None,
        *,
        store: StateStore | None = None,
        renderer: CacheRenderer | None = None,
        **kwargs: Any,
    ) -> None:
        """Create a new world.

        Args:
            scenario: the world parameters; a default WorldScenario if None
            store: persistence collaborator; an in-memory store if None
            renderer: rendering collaborator, optional
            kwargs: parameter overrides applied to the scenario before it is bound

        Raises:
            ConfigurationError: if any parameter is invalid
            ScenarioLockedError: if the scenario is already bound to a world
        """
        if scenario is None:
            scenario = WorldScenario(**kwargs)
        elif scenario.world is not None:
            raise ScenarioLockedError("world")
        else:
            for key, value in kwargs.items():
                scenario[key] = value

        try:
            start = np.asarray(scenario.start_position, dtype=float)
        except (TypeError, ValueError):
            start = None
        if start is None or start.shape != (2,):
            raise ConfigurationError("start_position", "must be an (x, y) pair")
        self._start = (float(start[0]), float(start[1]))

        self.registry = CellRegistry(scenario.tile_width, max_cells=scenario.max_cells)
        self.generator = DeterministicGenerator(scenario.salt)
        self.spawn_gate = SpawnGate(
            scenario.spawn_probability,
            policy=scenario.spawn_policy,
            generator=self.generator,
            rng=scenario.rng,
        )
        self.spacing_filter = SpacingFilter(
            scenario.min_spacing, cell_size=scenario.tile_width
        )

        self.store: StateStore = (
            store if store is not None else InMemoryStateStore(self._start)
        )
        self._state = self.store.load_agent_state()

        self.ledger = CoinLedger(Wallet(self._state.wallet))
        self.ledger.subscribe(self._on_transfer)
        self.lifecycle = CacheLifecycleManager(
            self.registry,
            scenario.radius,
            self.spawn_gate,
            self.spacing_filter,
            generator=self.generator,
            ledger=self.ledger,
            window_shape=scenario.window_shape,
        )
        self.renderer = renderer

        self._scenario = scenario
        scenario.world = self

        self.update_visibility()
        if self.renderer is not None:
            self.renderer.update_player(self.position, self.trail)
            self.renderer.update_status(self.wallet)

    @property
    def scenario(self) -> WorldScenario:
        """Return scenario instance."""
        return self._scenario

    @property
    def position(self) -> tuple[float, float]:
        """The agent's current position."""
        return self._state.position

    @property
    def trail(self) -> list[tuple[float, float]]:
        """Every position the agent has been at, oldest first (a copy)."""
        return list(self._state.trail)

    @property
    def wallet(self) -> int:
        """The agent's current wallet balance."""
        return self.ledger.wallet.balance

    @property
    def caches(self) -> dict[str, Cache]:
        """Active caches by key."""
        return self.lifecycle.caches

    @property
    def agent_state(self) -> AgentState:
        """A snapshot of the agent state."""
        state = self._state.copy()
        state.wallet = self.wallet
        return state

    def update_visibility(
        self, position: PositionLike | None = None
    ) -> VisibilityUpdate:
        """Spawn and despawn caches for the window around ``position``.

        Args:
            position: the position to compute the window for; the agent's if None

        Returns:
            VisibilityUpdate: the spawned and despawned cells of this pass
        """
        if position is None:
            position = self.position
        update = self.lifecycle.update_visibility(position)

        if self.renderer is not None:
            for cell in sorted(update.despawned, key=lambda c: c.coordinate):
                self.renderer.remove_cache(cell)
            for cell in update.visible:
                if cell in update.spawned:
                    cache = self.lifecycle.get(cell)
                    self.renderer.add_cache(cache, self.registry.cell_bounds(cell))
        return update

    def on_agent_move(self, new_position: PositionLike) -> VisibilityUpdate:
        """Move the agent to ``new_position``.

        Appends the position to the trail, updates visibility, refreshes the
        player on the renderer and saves the agent state.

        Args:
            new_position: the agent's new continuous position

        Returns:
            VisibilityUpdate: the spawned and despawned cells caused by the move
        """
        self._state.move_to(new_position)
        update = self.update_visibility()

        if self.renderer is not None:
            self.renderer.update_player(self.position, self.trail)
        self._save()
        return update

    def move(self, direction: str, steps: int = 1) -> VisibilityUpdate:
        """Move the agent ``steps`` whole tiles towards a compass ``direction``.

        Args:
            direction: compass direction such as "north" or "sw"
            steps: number of tiles to cover in a single move
        """
        target = step_position(
            self.position, direction, self.scenario.tile_width, steps=steps
        )
        return self.on_agent_move(target)

    def follow(self, source: PositionSource) -> list[VisibilityUpdate]:
        """Move the agent to every position ``source`` yields, in order."""
        return [self.on_agent_move(position) for position in source]

    def collect(self, cache_id: CacheId) -> int:
        """Collect all coins of the active cache ``cache_id`` into the wallet.

        Args:
            cache_id: ``"i:j"`` string, ``(i, j)`` tuple or Cell

        Returns:
            int: the amount moved; 0 if the cache is empty or not active
        """
        cache = self.lifecycle.get(cache_id)
        if cache is None:
            _cachegrid_logger.debug(f"collect on inactive cache {cache_id!r} ignored")
            return 0
        return cache.collect()

    def deposit(self, cache_id: CacheId) -> int:
        """Deposit the whole wallet into the active cache ``cache_id``.

        Args:
            cache_id: ``"i:j"`` string, ``(i, j)`` tuple or Cell

        Returns:
            int: the amount moved; 0 if the wallet is empty or the cache not active
        """
        cache = self.lifecycle.get(cache_id)
        if cache is None:
            _cachegrid_logger.debug(f"deposit on inactive cache {cache_id!r} ignored")
            return 0
        return cache.deposit()

    @method_logger(__name__)
    def reset(self) -> VisibilityUpdate:
        """Start over at the start position with an empty wallet and a fresh trail.

        Coins left in caches are lost along with the caches themselves.
        """
        despawned = self.lifecycle.clear()
        if self.renderer is not None:
            for cell in despawned:
                self.renderer.remove_cache(cell)

        self._state = AgentState.initial(self._start)
        self.ledger.wallet = Wallet()

        update = self.update_visibility()
        if self.renderer is not None:
            self.renderer.update_player(self.position, self.trail)
            self.renderer.update_status(self.wallet)
        self._save()
        return update

    def _on_transfer(self, kind: str, cache: Cache, amount: int) -> None:
        if self.renderer is not None:
            self.renderer.update_cache(cache)
            self.renderer.update_status(self.wallet)
        self._save()

    def _save(self) -> None:
        try:
            self.store.save_agent_state(self.agent_state)
        except (PersistenceError, OSError) as e:
            _cachegrid_logger.warning(f"could not save agent state: {e}")

    def __repr__(self):  # noqa: D105
        return (
            f"CacheWorld(position={self.position}, wallet={self.wallet}, "
            f"active_caches={len(self.lifecycle)})"
        )
