"""Tests for the collaborator protocols."""

from cachegrid import CacheWorld
from cachegrid.protocols import CacheRenderer, PositionSource, StateStore


class PrintRenderer:
    def __init__(self):
        self.lines = []

    def add_cache(self, cache, bounds):
        self.lines.append(f"add {cache.key} {cache.coin_count}")

    def remove_cache(self, cell):
        self.lines.append(f"remove {cell.key}")

    def update_cache(self, cache):
        self.lines.append(f"update {cache.key} {cache.coin_count}")

    def update_player(self, position, trail):
        self.lines.append(f"player at {position}")

    def update_status(self, wallet):
        self.lines.append(f"{wallet} coins")


def test_duck_typed_renderer():
    renderer = PrintRenderer()
    world = CacheWorld(tile_width=1.0, radius=1, spawn_probability=0.0, renderer=renderer)
    assert isinstance(world.renderer, CacheRenderer)
    assert renderer.lines == ["player at (0.0, 0.0)", "0 coins"]


def test_non_conforming_objects():
    assert not isinstance(object(), CacheRenderer)
    assert not isinstance(object(), StateStore)
    assert isinstance([(0.0, 0.0)], PositionSource)
