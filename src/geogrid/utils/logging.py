"""Simple logging utility.

Provides a lightweight wrapper around Python's standard logging
module to produce consistent log messages across the tiler, the rule
writers and the command-line pipeline.
"""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a configured logger with a preset format.

    Parameters
    ----------
    name : str
        Logger name, usually ``__name__``.
    level : int, optional
        Overrides the level of an already configured logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='[%(asctime)s] [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: int) -> None:
    """Set the level of every ``geogrid`` logger created so far."""
    for name in list(logging.root.manager.loggerDict):
        if name == "geogrid" or name.startswith("geogrid."):
            logging.getLogger(name).setLevel(level)
