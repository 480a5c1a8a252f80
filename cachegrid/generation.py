"""Deterministic content generation for grid cells.

World content must be reproducible: the same cell has to get the same coins in
every session, no matter in which order cells were visited or how often a cell
was despawned in between. Instead of a stateful random number generator, the
values are derived from a hash of the cell coordinates.

Two uses are kept apart by their seeds:

- spawn roll, seeded with ``(i, j)``: decides whether a cell may hold a cache
- coin count, seeded with ``(i, j, "coins")``: the starting coins of a cache
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence
from typing import Literal

import numpy as np

from cachegrid.discrete_space import Cell
from cachegrid.errors import ConfigurationError

SeedPart = int | float | str | bool
SpawnPolicy = Literal["deterministic", "random"]
SPAWN_POLICIES = ("deterministic", "random")

# number of mantissa bits in a double, so value() can never round up to 1.0
_MANTISSA_BITS = 53
MAX_COINS = 10


def _normalize(part):
    if isinstance(part, np.generic):
        return part.item()
    return part


class DeterministicGenerator:
    """Pure hash-based source of values in ``[0, 1)``.

    Attributes:
        salt (str): mixed into every hash, allows independent worlds

    """

    def __init__(self, salt: str = "") -> None:
        """Create a generator.

        Args:
            salt: extra string mixed into every seed
        """
        self.salt = salt

    def value(self, seed_parts: Sequence[SeedPart]) -> float:
        """Return a reproducible value in ``[0, 1)`` for ``seed_parts``.

        The parts are serialized to canonical JSON and hashed with SHA-256, so the
        result depends on nothing but the parts and the salt.

        Args:
            seed_parts: sequence of primitive values

        Returns:
            float: a value in ``[0, 1)``
        """
        payload = json.dumps(
            [self.salt, *(_normalize(p) for p in seed_parts)],
            separators=(",", ":"),
        )
        digest = hashlib.sha256(payload.encode("utf-8")).digest()
        bits = int.from_bytes(digest[:8], "big") >> (64 - _MANTISSA_BITS)
        return bits / float(2**_MANTISSA_BITS)

    def spawn_roll(self, i: int, j: int) -> float:
        """Value used by the deterministic spawn test for the raw pair ``(i, j)``."""
        return self.value((i, j))

    def coin_count(self, cell: Cell) -> int:
        """Initial coin count of a cache at ``cell``, in ``[0, MAX_COINS)``."""
        return int(self.value((cell.i, cell.j, "coins")) * MAX_COINS)

    def __repr__(self):  # noqa: D105
        return f"DeterministicGenerator(salt={self.salt!r})"


class SpawnGate:
    """Probabilistic test deciding whether a cell entering the window may spawn.

    Attributes:
        probability (float): chance that a cell passes
        policy (str): "deterministic" or "random"
        generator (DeterministicGenerator): hash source for the deterministic policy
        rng (np.random.Generator | None): random source for the random policy

    Notes:
        With the deterministic policy a cell either always or never passes, so
        cache placement is the same in every session. With the random policy the
        outcome is drawn anew every time a cell enters the window; pass ``rng`` to
        make a session reproducible.

    """

    def __init__(
        self,
        probability: float,
        policy: SpawnPolicy = "deterministic",
        generator: DeterministicGenerator | None = None,
        rng=None,
    ) -> None:
        """Create a spawn gate.

        Args:
            probability: chance in ``[0, 1]`` that a cell passes
            policy: "deterministic" or "random"
            generator: hash source for the deterministic policy
            rng: seed or numpy Generator for the random policy
        """
        if isinstance(probability, bool) or not 0 <= probability <= 1:
            raise ConfigurationError("spawn_probability", "must be within [0, 1]")
        if policy not in SPAWN_POLICIES:
            raise ConfigurationError(
                "spawn_policy", f"must be one of {SPAWN_POLICIES}, got {policy!r}"
            )

        self.probability = float(probability)
        self.policy = policy
        self.generator = generator if generator is not None else DeterministicGenerator()
        self.rng: np.random.Generator | None = (
            np.random.default_rng(rng) if policy == "random" else None
        )

    def __call__(self, cell: Cell) -> bool:
        """Return True if ``cell`` passes the spawn test."""
        if self.policy == "deterministic":
            return self.generator.spawn_roll(cell.i, cell.j) < self.probability
        return self.rng.random() < self.probability

    def __repr__(self):  # noqa: D105
        return f"SpawnGate(probability={self.probability}, policy={self.policy!r})"
