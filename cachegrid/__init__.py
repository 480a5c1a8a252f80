"""cachegrid: coin caches spawning around a single agent on an unbounded grid.

Core Objects: CacheWorld, CacheLifecycleManager, CellRegistry, CoinLedger.
"""

import datetime

import cachegrid.discrete_space as discrete_space
from cachegrid.caches import Cache, CacheLifecycleManager, VisibilityUpdate
from cachegrid.discrete_space import Cell, CellRegistry, Coin
from cachegrid.generation import DeterministicGenerator, SpawnGate
from cachegrid.ledger import CoinLedger, Wallet
from cachegrid.scenario import WorldScenario
from cachegrid.spacing import SpacingFilter
from cachegrid.state import AgentState, InMemoryStateStore, JSONStateStore
from cachegrid.world import CacheWorld

__all__ = [
    "AgentState",
    "Cache",
    "CacheLifecycleManager",
    "CacheWorld",
    "Cell",
    "CellRegistry",
    "Coin",
    "CoinLedger",
    "DeterministicGenerator",
    "InMemoryStateStore",
    "JSONStateStore",
    "SpacingFilter",
    "SpawnGate",
    "VisibilityUpdate",
    "Wallet",
    "WorldScenario",
    "discrete_space",
]

__title__ = "cachegrid"
__version__ = "0.1.0"
__license__ = "Apache 2.0"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} cachegrid authors"
