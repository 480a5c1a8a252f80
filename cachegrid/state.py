"""Agent state and its persistence.

The agent state is the only thing that survives a session: position, wallet
balance and the movement trail. Caches are never stored; they are regenerated
from the cell coordinates when the agent comes back.

States are stored as a versioned record::

    {
        "version": 1,
        "position": [x, y],
        "wallet": 12,
        "trail": [[x0, y0], [x1, y1], ...]
    }

Records are decoded defensively. A missing or malformed field falls back to its
default instead of failing, so a damaged save never prevents a session from
starting. Points may also be given as ``{"lat": .., "lng": ..}`` or
``{"x": .., "y": ..}`` mappings.
"""

from __future__ import annotations

import json
import math
import os
import pathlib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from cachegrid.cachegrid_logging import create_module_logger
from cachegrid.errors import PersistenceError

_logger = create_module_logger()

Position = tuple[float, float]
RECORD_VERSION = 1


def _decode_number(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _decode_point(value) -> Position | None:
    if isinstance(value, Mapping):
        if "lat" in value and "lng" in value:
            pair = (value["lat"], value["lng"])
        elif "x" in value and "y" in value:
            pair = (value["x"], value["y"])
        else:
            return None
    elif isinstance(value, Sequence) and not isinstance(value, str):
        if len(value) != 2:
            return None
        pair = (value[0], value[1])
    else:
        return None

    x, y = (_decode_number(v) for v in pair)
    if x is None or y is None:
        return None
    return (x, y)


def _decode_wallet(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if isinstance(value, float) and not value.is_integer():
        return 0
    return max(int(value), 0)


@dataclass
class AgentState:
    """Position, wallet balance and movement trail of the agent.

    Attributes:
        position: current continuous position
        wallet: number of coins carried, never negative
        trail: every position the agent has been at, oldest first
    """

    position: Position
    wallet: int = 0
    trail: list[Position] = field(default_factory=list)

    def __post_init__(self):  # noqa: D105
        self.position = (float(self.position[0]), float(self.position[1]))
        if self.wallet < 0:
            raise ValueError(f"Wallet balance cannot be negative, got {self.wallet}")
        self.trail = [(float(x), float(y)) for x, y in self.trail]
        if not self.trail:
            self.trail = [self.position]

    @classmethod
    def initial(cls, start: Sequence[float] = (0.0, 0.0)) -> AgentState:
        """Return a fresh state at ``start`` with an empty wallet."""
        return cls(position=tuple(start))

    def move_to(self, position: Sequence[float]) -> None:
        """Set the position and append it to the trail."""
        self.position = (float(position[0]), float(position[1]))
        self.trail.append(self.position)

    def copy(self) -> AgentState:
        """Return an independent copy."""
        return AgentState(self.position, self.wallet, list(self.trail))

    def to_record(self) -> dict[str, Any]:
        """Return the versioned record of this state."""
        return {
            "version": RECORD_VERSION,
            "position": list(self.position),
            "wallet": self.wallet,
            "trail": [list(point) for point in self.trail],
        }

    @classmethod
    def from_record(
        cls, record: Any, default_position: Sequence[float] = (0.0, 0.0)
    ) -> AgentState:
        """Decode a record, falling back to defaults for anything malformed.

        Args:
            record: the stored record, typically a dict loaded from JSON
            default_position: position used when the record has none

        Returns:
            AgentState: the decoded state; a fresh state for unusable records
        """
        if not isinstance(record, Mapping):
            return cls.initial(default_position)

        version = record.get("version", RECORD_VERSION)
        if version != RECORD_VERSION:
            _logger.warning(f"ignoring agent state with unknown version {version!r}")
            return cls.initial(default_position)

        position = _decode_point(record.get("position"))
        if position is None:
            position = (float(default_position[0]), float(default_position[1]))

        raw_trail = record.get("trail")
        trail = []
        if isinstance(raw_trail, list):
            trail = [p for p in map(_decode_point, raw_trail) if p is not None]

        return cls(
            position=position,
            wallet=_decode_wallet(record.get("wallet")),
            trail=trail or [position],
        )


class InMemoryStateStore:
    """Keeps the last saved record in memory, for tests and throwaway sessions."""

    def __init__(self, start_position: Sequence[float] = (0.0, 0.0)) -> None:
        """Create an empty store; loads return a fresh state at ``start_position``."""
        self.start_position = tuple(start_position)
        self.record: dict[str, Any] | None = None
        self.saves = 0

    def load_agent_state(self) -> AgentState:  # noqa: D102
        if self.record is None:
            return AgentState.initial(self.start_position)
        return AgentState.from_record(self.record, self.start_position)

    def save_agent_state(self, state: AgentState) -> None:  # noqa: D102
        self.record = state.to_record()
        self.saves += 1


class JSONStateStore:
    """Stores the agent state as a JSON file.

    Usage:
        store = JSONStateStore("save/agent.json")
        world = CacheWorld(store=store)

        world.move("north")  # saved after every move

    Notes:
        Loading never fails: a missing, unreadable or corrupt file yields a fresh
        state and a logged warning. Saving writes to a temporary file next to the
        target and replaces the target, so an interrupted save leaves the previous
        file intact.
    """

    def __init__(
        self, path: str | os.PathLike, start_position: Sequence[float] = (0.0, 0.0)
    ) -> None:
        """Create a store writing to ``path``."""
        self.path = pathlib.Path(path)
        self.start_position = tuple(start_position)

    def load_agent_state(self) -> AgentState:
        """Load the stored state, or a fresh state if there is none usable."""
        try:
            record = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return AgentState.initial(self.start_position)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            _logger.warning(f"could not load agent state from {self.path}: {e}")
            return AgentState.initial(self.start_position)

        return AgentState.from_record(record, self.start_position)

    def save_agent_state(self, state: AgentState) -> None:
        """Write ``state`` to the file.

        Raises:
            PersistenceError: if the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(state.to_record()), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(self.path, e) from e
