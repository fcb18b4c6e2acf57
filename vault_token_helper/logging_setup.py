"""
Log setup for the command-line tool.

Log records go to stderr; stdout carries only the token printed by
``get``.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "vault_token_helper"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 1,
}


def parse_level(name: str) -> int:
    """Map a level name such as ``"info"`` to a :mod:`logging` level."""
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Invalid log level {name!r}; expected one of: "
            + ", ".join(_LEVELS)
        ) from None


def setup_logger(level: str = "info") -> logging.Logger:
    """Creates a stderr logger for the package at *level*."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_level(level))

    # Replace handlers from an earlier call in the same process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    logger.addHandler(sh)
    logger.propagate = False

    return logger
