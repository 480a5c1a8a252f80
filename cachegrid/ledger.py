"""Coin transfers between the agent's wallet and active caches.

Only whole balances move: collecting empties the cache into the wallet,
depositing empties the wallet into the cache. Every transfer conserves the sum
of wallet and cache balance.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from cachegrid.cachegrid_logging import create_module_logger, method_logger

if TYPE_CHECKING:
    from cachegrid.caches import Cache

_logger = create_module_logger()

TransferCallback = Callable[[str, "Cache", int], None]


class Wallet:
    """The agent's balance of collected coins."""

    __slots__ = ["_balance"]

    def __init__(self, balance: int = 0) -> None:
        """Create a wallet.

        Args:
            balance: starting balance, must not be negative
        """
        if balance < 0:
            raise ValueError(f"Wallet balance cannot be negative, got {balance}")
        self._balance = int(balance)

    @property
    def balance(self) -> int:
        """Current number of coins in the wallet."""
        return self._balance

    def _add(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot add a negative amount, got {amount}")
        self._balance += amount

    def _empty(self) -> int:
        amount, self._balance = self._balance, 0
        return amount

    def __repr__(self):  # noqa: D105
        return f"Wallet(balance={self._balance})"


class CoinLedger:
    """Moves coins between a wallet and caches.

    Attributes:
        wallet (Wallet): the agent's wallet

    Notes:
        Observers registered with ``subscribe`` are called after every non-zero
        transfer with the kind of transfer ("collect" or "deposit"), the cache and
        the amount moved.

    """

    def __init__(self, wallet: Wallet | None = None) -> None:
        """Create a ledger for ``wallet`` (a new empty wallet if None)."""
        self.wallet = wallet if wallet is not None else Wallet()
        self._observers: list[TransferCallback] = []

    def subscribe(self, callback: TransferCallback) -> None:
        """Call ``callback(kind, cache, amount)`` after every non-zero transfer."""
        self._observers.append(callback)

    def _notify(self, kind: str, cache: Cache, amount: int) -> None:
        for callback in self._observers:
            callback(kind, cache, amount)

    @method_logger(__name__)
    def collect(self, cache: Cache) -> int:
        """Move all coins of ``cache`` into the wallet.

        Returns:
            int: the number of coins moved, 0 if the cache was empty
        """
        if cache.coin_count <= 0:
            return 0

        amount = cache._empty()
        self.wallet._add(amount)
        _logger.info(f"collected {amount} coins from cache {cache.key}")
        self._notify("collect", cache, amount)
        return amount

    @method_logger(__name__)
    def deposit(self, cache: Cache) -> int:
        """Move the whole wallet balance into ``cache``.

        Returns:
            int: the number of coins moved, 0 if the wallet was empty
        """
        if self.wallet.balance <= 0:
            return 0

        amount = self.wallet._empty()
        cache._add(amount)
        _logger.info(f"deposited {amount} coins into cache {cache.key}")
        self._notify("deposit", cache, amount)
        return amount
