"""Rendering collaborators for cache worlds.

- RecordingRenderer: keeps track of what would be on screen, without drawing
- CacheMapRenderer: draws caches, the player and the trail on a matplotlib Axes
"""

from cachegrid.visualization.map_renderer import CacheMapRenderer
from cachegrid.visualization.recording import RecordingRenderer

__all__ = ["CacheMapRenderer", "RecordingRenderer"]
