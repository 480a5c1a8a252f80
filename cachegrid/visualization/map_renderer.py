"""Matplotlib map of a cache world.

The map is drawn with the east axis horizontal and the north axis vertical, so a
position ``(north, east)`` is plotted at ``x=east, y=north``. Each active cache
is a rectangle over its cell, more opaque the more coins it holds.

Clicking a cache with the left mouse button collects it, clicking with the right
button deposits the wallet into it. The renderer only forwards these clicks to
the cache's ``collect``/``deposit`` capability.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from cachegrid.generation import MAX_COINS

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.text import Text

    from cachegrid.caches import Cache
    from cachegrid.discrete_space import Cell
    from cachegrid.discrete_space.registry import Bounds

LEFT_BUTTON = 1
RIGHT_BUTTON = 3


class CacheMapRenderer:
    """Draws a cache world on a matplotlib Axes.

    Attributes:
        ax: the Axes drawn on
        patches: rectangle of each displayed cache by key
        labels: coin count text of each displayed cache by key
        player_marker: Line2D marking the player
        trail_line: Line2D of the movement trail
        status_text: Text showing the wallet balance
    """

    def __init__(
        self,
        ax: Axes | None = None,
        cache_color: str = "tab:orange",
        player_color: str = "tab:blue",
        interactive: bool = True,
    ) -> None:
        """Create a map renderer.

        Args:
            ax: Axes to draw on; a new figure is created if None
            cache_color: fill color of cache rectangles
            player_color: color of the player marker and trail
            interactive: connect mouse clicks to collect/deposit
        """
        if ax is None:
            _, ax = plt.subplots()
        self.ax = ax
        self.cache_color = cache_color

        self.patches: dict[str, Rectangle] = {}
        self.labels: dict[str, Text] = {}
        self._caches: dict[str, Cache] = {}

        (self.trail_line,) = ax.plot([], [], color=player_color, alpha=0.5)
        (self.player_marker,) = ax.plot(
            [], [], marker="o", linestyle="", color=player_color
        )
        self.status_text = ax.text(
            0.01, 0.99, "", transform=ax.transAxes, va="top", ha="left"
        )
        ax.set_aspect("equal")
        ax.set_xlabel("east")
        ax.set_ylabel("north")

        self._click_cid = (
            ax.figure.canvas.mpl_connect("button_press_event", self._on_click)
            if interactive
            else None
        )

    @staticmethod
    def _alpha(coin_count: int) -> float:
        return 0.2 + 0.8 * min(coin_count, MAX_COINS) / MAX_COINS

    def add_cache(self, cache: Cache, bounds: Bounds) -> None:
        """Draw a rectangle and coin label for ``cache``."""
        (south, west), (north, east) = bounds
        patch = Rectangle(
            (west, south),
            east - west,
            north - south,
            facecolor=self.cache_color,
            edgecolor="black",
            linewidth=0.5,
            alpha=self._alpha(cache.coin_count),
        )
        self.ax.add_patch(patch)
        label = self.ax.text(
            (west + east) / 2,
            (south + north) / 2,
            str(cache.coin_count),
            ha="center",
            va="center",
            fontsize="x-small",
        )

        self.patches[cache.key] = patch
        self.labels[cache.key] = label
        self._caches[cache.key] = cache

    def remove_cache(self, cell: Cell) -> None:
        """Remove the rectangle and label of the cache at ``cell``, if drawn."""
        patch = self.patches.pop(cell.key, None)
        if patch is not None:
            patch.remove()
        label = self.labels.pop(cell.key, None)
        if label is not None:
            label.remove()
        self._caches.pop(cell.key, None)

    def update_cache(self, cache: Cache) -> None:
        """Refresh opacity and label of ``cache`` after a transfer."""
        if cache.key not in self.patches:
            return
        self.patches[cache.key].set_alpha(self._alpha(cache.coin_count))
        self.labels[cache.key].set_text(str(cache.coin_count))

    def update_player(
        self, position: tuple[float, float], trail: Sequence[tuple[float, float]]
    ) -> None:
        """Move the player marker to ``position`` and redraw the trail."""
        self.player_marker.set_data([position[1]], [position[0]])
        self.trail_line.set_data([p[1] for p in trail], [p[0] for p in trail])
        self.ax.relim()
        self.ax.autoscale_view()

    def update_status(self, wallet: int) -> None:
        """Show the wallet balance."""
        self.status_text.set_text(f"{wallet} coins")

    def cache_at(self, east: float, north: float) -> Cache | None:
        """Return the displayed cache whose rectangle contains the point, if any."""
        for key, patch in self.patches.items():
            west, south = patch.get_xy()
            if (
                west <= east < west + patch.get_width()
                and south <= north < south + patch.get_height()
            ):
                return self._caches[key]
        return None

    def draw(self) -> None:
        """Request a redraw of the figure."""
        self.ax.figure.canvas.draw_idle()

    def _on_click(self, event) -> None:
        if event.inaxes is not self.ax or event.xdata is None:
            return
        cache = self.cache_at(event.xdata, event.ydata)
        if cache is None:
            return

        if event.button == LEFT_BUTTON:
            cache.collect()
        elif event.button == RIGHT_BUTTON:
            cache.deposit()
        self.draw()
