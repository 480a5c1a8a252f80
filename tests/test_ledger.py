"""Tests for Wallet and CoinLedger."""

import pytest

from cachegrid.caches import Cache
from cachegrid.discrete_space import CellRegistry
from cachegrid.ledger import CoinLedger, Wallet


@pytest.fixture
def cell():
    return CellRegistry().canonicalize(2, 3)


def test_wallet_rejects_negative_balance():
    with pytest.raises(ValueError, match="negative"):
        Wallet(-1)


def test_collect_scenario(cell):
    """A cache with 4 coins yields 4 once and 0 afterwards."""
    ledger = CoinLedger()
    cache = Cache(cell, 4, ledger=ledger)

    assert ledger.collect(cache) == 4
    assert cache.coin_count == 0
    assert ledger.wallet.balance == 4
    assert ledger.collect(cache) == 0
    assert ledger.wallet.balance == 4


def test_deposit_moves_whole_wallet(cell):
    ledger = CoinLedger(Wallet(7))
    cache = Cache(cell, 2, ledger=ledger)

    assert ledger.deposit(cache) == 7
    assert cache.coin_count == 9
    assert ledger.wallet.balance == 0
    assert ledger.deposit(cache) == 0
    assert cache.coin_count == 9


@pytest.mark.parametrize(
    "operations",
    [
        ["collect", "deposit", "collect"],
        ["deposit", "deposit", "collect", "collect"],
        ["collect", "collect", "deposit", "collect", "deposit"],
    ],
)
def test_conservation(cell, operations):
    ledger = CoinLedger(Wallet(3))
    cache = Cache(cell, 5, ledger=ledger)
    total = ledger.wallet.balance + cache.coin_count

    for operation in operations:
        getattr(ledger, operation)(cache)
        assert ledger.wallet.balance + cache.coin_count == total
        assert ledger.wallet.balance >= 0
        assert cache.coin_count >= 0


def test_observers_see_non_zero_transfers(cell):
    ledger = CoinLedger()
    cache = Cache(cell, 4, ledger=ledger)
    seen = []
    ledger.subscribe(lambda kind, c, amount: seen.append((kind, c.key, amount)))

    ledger.collect(cache)
    ledger.collect(cache)
    ledger.deposit(cache)
    ledger.deposit(cache)

    assert seen == [("collect", "2:3", 4), ("deposit", "2:3", 4)]


def test_wallet_and_cache_move_whole_balances(cell):
    wallet = Wallet(2)
    wallet._add(3)
    assert wallet.balance == 5
    assert wallet._empty() == 5
    assert wallet.balance == 0

    cache = Cache(cell, 4)
    cache._add(1)
    assert cache._empty() == 5
    assert cache.coin_count == 0

    with pytest.raises(ValueError, match="negative"):
        wallet._add(-1)
    with pytest.raises(ValueError, match="negative"):
        cache._add(-1)
