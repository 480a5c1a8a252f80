"""Tests for visibility window offsets."""

import logging

import numpy as np
import pytest

from cachegrid.cachegrid_logging import CACHEGRID_LOGGER_NAME
from cachegrid.discrete_space import window_offsets
from cachegrid.errors import ConfigurationError


def test_square_window_radius_one():
    """The square window of radius 1 is the 3x3 block, row-major."""
    offsets = window_offsets(1)
    expected = [(di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1)]
    assert [tuple(o) for o in offsets.tolist()] == expected


@pytest.mark.parametrize(
    ("radius", "shape", "count"),
    [(1, "square", 9), (2, "square", 25), (1, "circle", 5), (2, "circle", 13)],
)
def test_window_sizes(radius, shape, count):
    assert len(window_offsets(radius, shape)) == count


def test_circle_window_within_radius():
    offsets = window_offsets(3, "circle")
    assert np.all((offsets**2).sum(axis=1) <= 9)
    assert [0, 3] in offsets.tolist()
    assert [3, 3] not in offsets.tolist()


@pytest.mark.parametrize("radius", [0, -1, 1.5, True, "2"])
def test_invalid_radius(radius):
    with pytest.raises(ConfigurationError, match="radius"):
        window_offsets(radius)


def test_invalid_shape():
    with pytest.raises(ConfigurationError, match="window_shape"):
        window_offsets(1, "hexagon")


def test_window_offsets_logs_calls(caplog):
    with caplog.at_level(logging.DEBUG, logger=CACHEGRID_LOGGER_NAME):
        window_offsets(2, "circle")
    assert "calling window_offsets with (2, 'circle')" in caplog.text
