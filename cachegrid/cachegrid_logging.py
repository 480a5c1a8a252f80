"""This provides logging functionality for cachegrid.

It is modeled after the logging setup of scientific Python libraries: every
module gets its own child logger under a shared ``CACHEGRID`` root, so users can
switch on debug output for the whole package or a single module. By default no
handler is attached; call :func:`log_to_stderr` to see output.

Logger hierarchy::

    CACHEGRID
    CACHEGRID.cachegrid.world
    CACHEGRID.cachegrid.caches
    ...

"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO

__all__ = [
    "DEBUG",
    "DEFAULT_LEVEL",
    "INFO",
    "create_module_logger",
    "function_logger",
    "get_rootlogger",
    "log_to_stderr",
    "method_logger",
]

DEFAULT_LEVEL = DEBUG
CACHEGRID_LOGGER_NAME = "CACHEGRID"
LOGGER_FORMAT = "[%(name)s %(levelname)s] %(message)s"


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Create a module logger.

    Args:
        name: name of the module; derived from the calling module when None
    """
    if name is None:
        frame = inspect.stack()[1]
        module = inspect.getmodule(frame[0])
        name = module.__name__ if module is not None else "__main__"

    return logging.getLogger(f"{CACHEGRID_LOGGER_NAME}.{name}")


def get_rootlogger() -> logging.Logger:
    """Return the root logger of the package."""
    return logging.getLogger(CACHEGRID_LOGGER_NAME)


def method_logger(name: str):
    """Decorator for adding debug logging to a method.

    Args:
        name: the name of the module in which the method is defined
    """
    logger = logging.getLogger(f"{CACHEGRID_LOGGER_NAME}.{name}")

    def real_decorator(meth):
        @wraps(meth)
        def wrapper(*args, **kwargs):
            # first argument is self
            classname = args[0].__class__.__name__
            logger.debug(
                f"calling {classname}.{meth.__name__} with {args[1:]} and {kwargs}"
            )
            return meth(*args, **kwargs)

        return wrapper

    return real_decorator


def function_logger(name: str):
    """Decorator for adding debug logging to a function.

    Args:
        name: the name of the module in which the function is defined
    """
    logger = logging.getLogger(f"{CACHEGRID_LOGGER_NAME}.{name}")

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"calling {func.__name__} with {args} and {kwargs}")
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def log_to_stderr(level: int | None = None, pass_root_logger_level: bool = False):
    """Attach a stderr handler to the package root logger.

    Args:
        level: the level at which to log; DEFAULT_LEVEL when None
        pass_root_logger_level: if True, also set the level on the handler

    Returns:
        the package root logger
    """
    if level is None:
        level = DEFAULT_LEVEL

    logger = get_rootlogger()
    logger.setLevel(level)

    handler = logging.StreamHandler()
    if pass_root_logger_level:
        handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOGGER_FORMAT))

    logger.addHandler(handler)

    return logger
