"""Visibility window shapes.

A window is described by the index offsets ``(di, dj)`` it covers relative to the
agent's cell. Offsets are listed row-major, ``di`` outer and ``dj`` inner, both
running from ``-radius`` to ``radius``:

- "square": Chebyshev distance, ``max(|di|, |dj|) <= radius``
- "circle": Euclidean distance, ``di**2 + dj**2 <= radius**2``

For radius 1 the square window is::

    (-1, -1), (-1, 0), (-1, 1),
    ( 0, -1), ( 0, 0), ( 0, 1),
    ( 1, -1), ( 1, 0), ( 1, 1),

"""

from __future__ import annotations

from typing import Literal

import numpy as np

from cachegrid.cachegrid_logging import function_logger
from cachegrid.errors import ConfigurationError

WindowShape = Literal["square", "circle"]
WINDOW_SHAPES = ("square", "circle")


@function_logger(__name__)
def window_offsets(radius: int, shape: WindowShape = "square") -> np.ndarray:
    """Return the ``(n, 2)`` integer array of offsets covered by a window.

    Args:
        radius: window radius in cells
        shape: "square" or "circle"

    Raises:
        ConfigurationError: if radius is not a positive integer or shape is unknown
    """
    validate_window(radius, shape)

    steps = np.arange(-radius, radius + 1)
    di, dj = np.meshgrid(steps, steps, indexing="ij")
    offsets = np.column_stack((di.ravel(), dj.ravel()))

    if shape == "circle":
        offsets = offsets[(offsets**2).sum(axis=1) <= radius**2]
    return offsets


def validate_window(radius, shape) -> None:
    """Raise ConfigurationError for an invalid radius or shape."""
    if isinstance(radius, bool) or not isinstance(radius, int | np.integer):
        raise ConfigurationError("radius", "must be an integer")
    if radius <= 0:
        raise ConfigurationError("radius", "must be positive")
    if shape not in WINDOW_SHAPES:
        raise ConfigurationError(
            "window_shape", f"must be one of {WINDOW_SHAPES}, got {shape!r}"
        )
