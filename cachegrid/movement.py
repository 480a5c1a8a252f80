"""Position sources driving the agent.

- ManualPositionSource: step-wise movement by whole tiles in compass directions,
  the equivalent of movement buttons
- ReplayPositionSource: plays back a recorded sequence of positions, such as a
  saved movement trail

Compass directions map onto cell index steps. The first axis points north, the
second axis points east.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Sequence

from cachegrid.protocols import PositionLike

# fmt: off
DIRECTION_MAP: dict[str, tuple[int, int]] = {
    "n": (1, 0), "north": (1, 0), "up": (1, 0),
    "s": (-1, 0), "south": (-1, 0), "down": (-1, 0),
    "e": (0, 1), "east": (0, 1), "right": (0, 1),
    "w": (0, -1), "west": (0, -1), "left": (0, -1),
    "ne": (1, 1), "northeast": (1, 1), "upright": (1, 1),
    "nw": (1, -1), "northwest": (1, -1), "upleft": (1, -1),
    "se": (-1, 1), "southeast": (-1, 1), "downright": (-1, 1),
    "sw": (-1, -1), "southwest": (-1, -1), "downleft": (-1, -1),
}
# fmt: on


def direction_vector(direction: str) -> tuple[int, int]:
    """Return the cell index step for a compass direction.

    Args:
        direction: a key of DIRECTION_MAP, case insensitive

    Raises:
        ValueError: for an unknown direction
    """
    try:
        return DIRECTION_MAP[direction.lower()]
    except KeyError:
        raise ValueError(f"Invalid direction: {direction}") from None


def step_position(
    position: Sequence[float], direction: str, distance: float, steps: int = 1
) -> tuple[float, float]:
    """Return ``position`` moved ``steps`` times ``distance`` towards ``direction``."""
    di, dj = direction_vector(direction)
    return (
        float(position[0]) + di * distance * steps,
        float(position[1]) + dj * distance * steps,
    )


class ManualPositionSource:
    """Queue of compass moves that yields the resulting positions.

    Usage:
        source = ManualPositionSource((0.0, 0.0), step=world.scenario.tile_width)
        source.push("north", 3)
        source.push("east")
        world.follow(source)

    Attributes:
        position: the position after the last yielded move
        step: distance covered by a single move
    """

    def __init__(self, start: PositionLike, step: float) -> None:
        """Create a manual source at ``start`` moving ``step`` per move."""
        if not step > 0:
            raise ValueError(f"Step must be positive, got {step}")
        self.position = (float(start[0]), float(start[1]))
        self.step = float(step)
        self._pending: deque[str] = deque()

    def push(self, direction: str, steps: int = 1) -> None:
        """Queue ``steps`` single moves towards ``direction``."""
        direction_vector(direction)
        if steps < 0:
            raise ValueError(f"Steps cannot be negative, got {steps}")
        self._pending.extend([direction] * steps)

    def __len__(self) -> int:  # noqa: D105
        return len(self._pending)

    def __iter__(self) -> Iterator[tuple[float, float]]:  # noqa: D105
        while self._pending:
            direction = self._pending.popleft()
            self.position = step_position(self.position, direction, self.step)
            yield self.position


class ReplayPositionSource:
    """Plays back a fixed sequence of positions."""

    def __init__(self, positions: Iterable[PositionLike]) -> None:  # noqa: D107
        self.positions = [(float(p[0]), float(p[1])) for p in positions]

    def __len__(self) -> int:  # noqa: D105
        return len(self.positions)

    def __iter__(self) -> Iterator[tuple[float, float]]:  # noqa: D105
        return iter(self.positions)
