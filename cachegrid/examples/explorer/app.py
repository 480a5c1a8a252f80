"""
Cache Explorer
==============

Walk the grid with the arrow keys and pick up coins. Caches appear around the
player as cells come into view and vanish again when left behind, taking any
coins still in them along.

- arrow keys: move one tile
- left click on a cache: collect its coins
- right click on a cache: deposit the wallet
- r: start over

Run with ``python -m cachegrid.examples.explorer.app [save.json]``.
"""

import sys

import matplotlib.pyplot as plt

from cachegrid import CacheWorld, JSONStateStore, WorldScenario
from cachegrid.cachegrid_logging import INFO, log_to_stderr
from cachegrid.visualization import CacheMapRenderer

KEY_DIRECTIONS = {
    "up": "north",
    "down": "south",
    "left": "west",
    "right": "east",
}


class ExplorerScenario(WorldScenario):
    """Scenario parameters for the explorer."""

    tile_width: float = 1e-4
    radius: int = 8
    min_spacing: float = 3e-4
    spawn_probability: float = 0.1


def make_app(save_path=None, ax=None, **kwargs):
    """Create the world and its map, wired to keyboard input.

    Args:
        save_path: JSON file to keep the agent state in, or None for no saving
        ax: Axes to draw on; a new figure if None
        kwargs: ExplorerScenario parameter overrides

    Returns:
        tuple[CacheWorld, CacheMapRenderer]
    """
    scenario = ExplorerScenario(**kwargs)
    store = (
        JSONStateStore(save_path, scenario.start_position)
        if save_path is not None
        else None
    )
    renderer = CacheMapRenderer(ax=ax)
    world = CacheWorld(scenario, store=store, renderer=renderer)

    def on_key(event):
        if event.key in KEY_DIRECTIONS:
            world.move(KEY_DIRECTIONS[event.key])
        elif event.key == "r":
            world.reset()
        else:
            return
        renderer.draw()

    renderer.ax.figure.canvas.mpl_connect("key_press_event", on_key)
    renderer.ax.set_title("Cache Explorer")
    return world, renderer


def main(argv=None):  # noqa: D103
    argv = sys.argv[1:] if argv is None else argv
    log_to_stderr(INFO)
    plt.rcParams["keymap.back"] = []
    plt.rcParams["keymap.forward"] = []
    plt.rcParams["keymap.home"] = ["h", "home"]
    make_app(argv[0] if argv else None)
    plt.show()


if __name__ == "__main__":
    main()
