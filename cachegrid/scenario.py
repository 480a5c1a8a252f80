"""Configuration of a cache world.

A scenario is a mutable mapping of world parameters with class-level defaults.
It can be changed freely until it is handed to a :class:`~cachegrid.world.CacheWorld`;
from then on it is locked, because the world has already built its registry,
spawn gate and filters from it.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import MutableMapping, Sequence
from functools import partial
from itertools import count
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from cachegrid.errors import ConfigurationError, ScenarioLockedError

SeedLike = int | np.integer | Sequence[int] | np.random.SeedSequence
RNGLike = np.random.Generator | np.random.BitGenerator


if TYPE_CHECKING:
    from cachegrid.world import CacheWorld


class Scenario(MutableMapping):
    """A Scenario class.

    Attributes:
        world : the world instance to which this scenario is bound
        scenario_id : a unique identifier for this scenario, auto-generated, starting from 0

    Notes:
        in essence, this is a mutable mapping with
        protection, so it cannot be mutated once
        bound to a world. Subclasses declare their
        parameters and defaults as class attributes.

    """

    _ids: ClassVar[defaultdict] = defaultdict(partial(count, 0))

    __slots__ = ("__dict__", "scenario_id", "world")

    def __init__(self, *, rng: RNGLike | SeedLike | None = None, **kwargs):
        """Initialize a Scenario.

        Args:
            rng: a random number generator or valid seed value for a numpy generator.
            kwargs: all other scenario parameters

        """
        self.world: CacheWorld | None = None
        self.scenario_id: int = next(self._ids[self.__class__])

        unknown = set(kwargs) - set(self.defaults())
        if self.defaults() and unknown:
            raise ConfigurationError(
                f"Unknown parameters for {type(self).__name__}: {sorted(unknown)}"
            )
        self.__dict__.update(self.defaults(), rng=rng, **kwargs)

    @classmethod
    def defaults(cls) -> dict:
        """Return the parameters declared as class attributes, with their defaults."""
        params = {}
        for klass in reversed(cls.__mro__):
            if klass in (Scenario, MutableMapping, object) or not issubclass(
                klass, Scenario
            ):
                continue
            for key, value in vars(klass).items():
                if key.startswith("_") or callable(value):
                    continue
                if isinstance(value, property | classmethod | staticmethod):
                    continue
                params[key] = value
        return params

    def __setitem__(self, key, value):  # noqa: D105
        if self.world is not None:
            raise ScenarioLockedError(key)

        if self.defaults() and key != "rng" and key not in self.defaults():
            raise ConfigurationError(
                f"Unknown parameter for {type(self).__name__}: {key!r}"
            )
        self.__dict__[key] = value

    def __getitem__(self, key):  # noqa: D105
        return self.__dict__[key]

    def __delitem__(self, key):  # noqa: D105
        if self.world is not None:
            raise ScenarioLockedError(key)
        del self.__dict__[key]

    def __iter__(self):  # noqa: D105
        return iter(self.__dict__)

    def __len__(self):  # noqa: D105
        return len(self.__dict__)

    def __setattr__(self, key, value):  # noqa: D105
        if key not in self.__slots__:
            self.__setitem__(key, value)
        else:
            super().__setattr__(key, value)

    def __delattr__(self, key):  # noqa: D105
        if key not in self.__slots__:
            self.__delitem__(key)
        else:
            super().__delattr__(key)

    def to_dict(self):
        """Return a dict representation of the scenario."""
        content = self.__dict__.copy()
        content["scenario_id"] = self.scenario_id
        return content


class WorldScenario(Scenario):
    """Parameters of a cache world.

    Attributes:
        tile_width: side length of a grid cell in position units
        radius: visibility window radius in cells
        window_shape: "square" (Chebyshev) or "circle" (Euclidean) window
        min_spacing: smallest distance between two active caches, in position units
        spawn_probability: chance that a cell entering the window may hold a cache
        spawn_policy: "deterministic" (hash of the cell) or "random" (seeded rng)
        salt: extra seed for the deterministic generator, selects a different world
        start_position: where a fresh agent starts
        max_cells: bound on the canonical cell registry, None for unbounded
    """

    tile_width: float = 1e-4
    radius: int = 8
    window_shape: str = "square"
    min_spacing: float = 0.0
    spawn_probability: float = 0.1
    spawn_policy: str = "deterministic"
    salt: str = ""
    start_position: tuple[float, float] = (0.0, 0.0)
    max_cells: int | None = None
