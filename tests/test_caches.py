"""Tests for caches and the CacheLifecycleManager."""

from itertools import combinations

import pytest

from cachegrid.caches import Cache, CacheLifecycleManager
from cachegrid.discrete_space import Cell, CellRegistry, Coin
from cachegrid.errors import ConfigurationError
from cachegrid.generation import DeterministicGenerator, SpawnGate
from cachegrid.ledger import CoinLedger, Wallet
from cachegrid.spacing import SpacingFilter


def make_manager(
    radius=1,
    probability=1.0,
    min_spacing=0.0,
    tile_width=1.0,
    window_shape="square",
    ledger=None,
):
    registry = CellRegistry(tile_width)
    generator = DeterministicGenerator()
    return CacheLifecycleManager(
        registry,
        radius,
        SpawnGate(probability, generator=generator),
        SpacingFilter(min_spacing, cell_size=tile_width),
        generator=generator,
        ledger=ledger,
        window_shape=window_shape,
    )


def assert_invariants(manager, update):
    visible = set(update.visible)
    assert set(manager.active_cells) <= visible
    spacing = manager.spacing_filter
    for a, b in combinations(manager.active_cells, 2):
        assert spacing.distance(a, b) >= spacing.min_spacing


class TestCache:
    """Tests for the Cache class."""

    def test_cache_attributes(self):
        cell = CellRegistry().canonicalize(2, 3)
        cache = Cache(cell, 4)
        assert cache.key == "2:3"
        assert cache.coin_count == 4
        assert cache.coins == [Coin(2, 3, s) for s in range(4)]
        assert cache.active

    def test_negative_coin_count(self):
        with pytest.raises(ValueError, match="negative"):
            Cache(Cell(0, 0), -1)

    def test_unbound_cache_cannot_transfer(self):
        cache = Cache(Cell(0, 0), 1)
        with pytest.raises(RuntimeError, match="not bound"):
            cache.collect()

    def test_capability_forwards_to_ledger(self):
        ledger = CoinLedger()
        cache = Cache(CellRegistry().canonicalize(2, 3), 4, ledger=ledger)
        assert cache.collect() == 4
        assert ledger.wallet.balance == 4
        assert cache.deposit() == 4
        assert cache.coin_count == 4

    def test_inactive_cache_ignores_transfers(self):
        ledger = CoinLedger(Wallet(5))
        cache = Cache(Cell(0, 0), 3, ledger=ledger)
        cache.active = False
        assert cache.collect() == 0
        assert cache.deposit() == 0
        assert ledger.wallet.balance == 5
        assert cache.coin_count == 3


class TestVisibility:
    """Tests for CacheLifecycleManager.update_visibility."""

    def test_evaluates_nine_candidates_around_origin(self):
        """Tile width 1 and radius 1 around cell (0, 0) evaluate the 3x3 block."""
        manager = make_manager(probability=0.0)
        update = manager.update_visibility((0.0, 0.0))

        expected = {(i, j) for i in (-1, 0, 1) for j in (-1, 0, 1)}
        assert update.center.coordinate == (0, 0)
        assert len(update.evaluated) == 9
        assert {cell.coordinate for cell in update.evaluated} == expected
        assert {cell.coordinate for cell in update.visible} == expected
        assert not update.spawned
        assert len(manager) == 0

    def test_window_uses_canonical_cells(self):
        manager = make_manager()
        update = manager.update_visibility((0.5, 0.5))
        for cell in update.visible:
            assert manager.registry.canonicalize(*cell.coordinate) is cell

    def test_all_cells_spawn_with_certain_gate(self):
        manager = make_manager(probability=1.0)
        update = manager.update_visibility((0.5, 0.5))

        assert len(update.spawned) == 9
        assert len(manager) == 9
        for key, cache in manager.caches.items():
            assert cache.key == key
            assert cache.coin_count == manager.generator.coin_count(cache.cell)

    def test_cells_staying_visible_are_not_tried_again(self):
        manager = make_manager(probability=0.5)
        manager.update_visibility((0.1, 0.1))
        before = set(manager.caches)

        update = manager.update_visibility((0.9, 0.9))

        assert update.evaluated == ()
        assert not update.spawned
        assert not update.despawned
        assert set(manager.caches) == before

    def test_moving_one_cell_evaluates_entering_column(self):
        manager = make_manager(probability=1.0)
        manager.update_visibility((0.5, 0.5))
        update = manager.update_visibility((0.5, 1.5))

        assert {cell.coordinate for cell in update.evaluated} == {
            (-1, 2),
            (0, 2),
            (1, 2),
        }
        assert {cell.coordinate for cell in update.despawned} == {
            (-1, -1),
            (0, -1),
            (1, -1),
        }
        assert update.spawned == frozenset(update.evaluated)
        assert "0:-1" not in manager
        assert "0:2" in manager

    def test_spacing_rejects_crowded_candidates(self):
        """Only the first cell of a window narrower than the spacing can spawn."""
        manager = make_manager(probability=1.0, min_spacing=1e-3, tile_width=1e-4)
        update = manager.update_visibility((0.5e-4, 0.5e-4))

        assert len(update.evaluated) == 9
        assert [cell.coordinate for cell in update.spawned] == [(-1, -1)]
        assert list(manager.caches) == ["-1:-1"]

    @pytest.mark.parametrize("window_shape", ["square", "circle"])
    def test_invariants_hold_while_walking(self, window_shape):
        manager = make_manager(
            radius=3, probability=0.4, min_spacing=2.5, window_shape=window_shape
        )
        position = [0.5, 0.5]
        for step in range(40):
            position[step % 2] += 1.0 if step < 20 else -1.0
            update = manager.update_visibility(position)
            assert_invariants(manager, update)

    def test_circle_window(self):
        manager = make_manager(radius=2, probability=0.0, window_shape="circle")
        update = manager.update_visibility((0.5, 0.5))
        assert len(update.visible) == 13
        assert manager.registry.canonicalize(2, 2) not in update.visible


class TestLifecycle:
    """Tests for despawning and respawning."""

    def test_reentry_restores_deterministic_coin_count(self):
        manager = make_manager(probability=1.0, ledger=CoinLedger())
        manager.update_visibility((0.5, 0.5))
        original = {key: cache.coin_count for key, cache in manager.caches.items()}

        # empty a cache, then leave it behind; its coins are lost
        manager.get("0:0").collect()
        update = manager.update_visibility((0.5, 10.5))
        assert len(update.despawned) == 9
        assert "0:0" not in manager

        manager.update_visibility((0.5, 0.5))
        restored = {key: cache.coin_count for key, cache in manager.caches.items()}
        assert restored == original

    def test_despawned_cache_is_deactivated(self):
        ledger = CoinLedger()
        manager = make_manager(probability=1.0, ledger=ledger)
        manager.update_visibility((0.5, 0.5))
        cache = manager.get("0:0")

        manager.update_visibility((100.5, 100.5))

        assert not cache.active
        assert cache.collect() == 0
        assert ledger.wallet.balance == 0

    def test_spacing_outcome_may_differ_but_count_does_not(self):
        manager = make_manager(probability=1.0, min_spacing=2.0)
        manager.update_visibility((0.5, 0.5))
        first = {key: c.coin_count for key, c in manager.caches.items()}

        manager.update_visibility((0.5, 1.5))
        manager.update_visibility((0.5, 20.5))
        manager.update_visibility((0.5, 0.5))

        for key, cache in manager.caches.items():
            expected = manager.generator.coin_count(cache.cell)
            assert cache.coin_count == expected
            if key in first:
                assert first[key] == expected

    def test_clear(self):
        manager = make_manager(probability=1.0)
        manager.update_visibility((0.5, 0.5))
        despawned = manager.clear()

        assert len(despawned) == 9
        assert len(manager) == 0
        assert manager.visible_cells == []

        update = manager.update_visibility((0.5, 0.5))
        assert len(update.spawned) == 9


@pytest.mark.parametrize(
    "cache_id", ["0:0", (0, 0), Cell(0, 0)], ids=["string", "tuple", "cell"]
)
def test_get_accepts_identifiers(cache_id):
    manager = make_manager(probability=1.0)
    manager.update_visibility((0.5, 0.5))
    assert manager.get(cache_id) is manager.caches["0:0"]


@pytest.mark.parametrize("cache_id", ["5:5", "bad", "1:2:3", "a:b", None, 3.5])
def test_get_misses(cache_id):
    manager = make_manager(probability=1.0)
    manager.update_visibility((0.5, 0.5))
    assert manager.get(cache_id) is None
    assert cache_id not in manager


@pytest.mark.parametrize("radius", [0, -2])
def test_invalid_radius(radius):
    with pytest.raises(ConfigurationError, match="radius"):
        make_manager(radius=radius)
