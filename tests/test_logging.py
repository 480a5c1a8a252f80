"""Tests for the logging helpers."""

import logging

import pytest

from cachegrid.cachegrid_logging import (
    CACHEGRID_LOGGER_NAME,
    create_module_logger,
    function_logger,
    get_rootlogger,
    log_to_stderr,
    method_logger,
)


@pytest.fixture
def root_logger():
    logger = get_rootlogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_module_logger_name():
    assert create_module_logger().name == f"{CACHEGRID_LOGGER_NAME}.{__name__}"
    assert create_module_logger("x").name == f"{CACHEGRID_LOGGER_NAME}.x"


def test_method_logger(caplog):
    class Counter:
        @method_logger(__name__)
        def add(self, amount, twice=False):
            return amount * (2 if twice else 1)

    with caplog.at_level(logging.DEBUG, logger=CACHEGRID_LOGGER_NAME):
        assert Counter().add(3, twice=True) == 6
    assert "calling Counter.add with (3,) and {'twice': True}" in caplog.text


def test_function_logger(caplog):
    @function_logger(__name__)
    def double(x):
        return 2 * x

    with caplog.at_level(logging.DEBUG, logger=CACHEGRID_LOGGER_NAME):
        assert double(4) == 8
    assert "calling double with (4,)" in caplog.text


def test_log_to_stderr(root_logger, capsys):
    logger = log_to_stderr(logging.INFO, pass_root_logger_level=True)
    assert logger is root_logger
    assert logger.level == logging.INFO
    assert logger.handlers[-1].level == logging.INFO

    create_module_logger("test").info("hello")
    assert "[CACHEGRID.test INFO] hello" in capsys.readouterr().err


def test_world_logs_transfers(caplog):
    from cachegrid import CacheWorld

    world = CacheWorld(tile_width=1.0, radius=1, spawn_probability=1.0)
    key = next(k for k, c in world.caches.items() if c.coin_count > 0)
    with caplog.at_level(logging.INFO, logger=CACHEGRID_LOGGER_NAME):
        world.collect(key)
    assert f"from cache {key}" in caplog.text
