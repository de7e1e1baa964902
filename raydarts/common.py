"""Shared utilities: the error type, logging setup and string helpers."""

from __future__ import annotations

import logging
import math
import sys

__all__ = ["DartsError", "darts_init", "indent", "time_string", "LOGGER_NAME"]

LOGGER_NAME = "raydarts"

TRACE = 5

# Verbosity thresholds 0..6: trace, debug, info, warn, err, critical, off.
_VERBOSITY_LEVELS = (
    TRACE,
    logging.DEBUG,
    logging.INFO,
    logging.WARNING,
    logging.ERROR,
    logging.CRITICAL,
    logging.CRITICAL + 10,
)


class DartsError(RuntimeError):
    """Error carrying a human-readable description of what went wrong."""


def darts_init(verbosity: int = 2) -> logging.Logger:
    """Configure the package logger to print plain messages at or above ``verbosity``.

    The verbosity threshold runs from 0 (trace) to 6 (off); the default is 2 (info).
    Returns the configured logger.
    """
    if not 0 <= verbosity < len(_VERBOSITY_LEVELS):
        raise ValueError(f"verbosity must be in 0..{len(_VERBOSITY_LEVELS) - 1}, got {verbosity}")

    logging.addLevelName(TRACE, "TRACE")
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_VERBOSITY_LEVELS[verbosity])
    logger.propagate = False
    return logger


def time_string(time: float, precision: int = 2) -> str:
    """Convert a time in milliseconds into a human-readable string."""
    if math.isnan(time) or math.isinf(time):
        return "inf"

    millis = int(time)
    seconds = int(millis / 1000)
    minutes = int(seconds / 60)
    hours = int(minutes / 60)
    days = int(hours / 24)

    if days > 0:
        return f"{days}d:{hours % 24:0>2}h:{minutes % 60:0>2}m"
    if hours > 0:
        return f"{hours % 24}h:{minutes % 60:0>2}m:{seconds % 60:0>2}s"
    if minutes > 0:
        return f"{minutes % 60}m:{seconds % 60:0>2}s"
    if seconds > 0:
        return f"{time / 1000:.3f}s"
    return f"{millis}ms"


def indent(text: str, amount: int = 2) -> str:
    """Indent every line of ``text`` except the first by ``amount`` spaces."""
    separator = "\n" + " " * amount
    if text.endswith("\n"):
        return separator.join(text[:-1].split("\n")) + "\n"
    return separator.join(text.split("\n"))