#!/usr/bin/env python3
"""IntesisBox - a logger for the console (e.g. for the CLI).

The library itself only emits log records, it does not configure any handlers.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime as dt
from typing import Final

import colorlog

from .version import VERSION

DEFAULT_FMT: Final = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DEFAULT_DATEFMT: Final = "%H:%M:%S.%f"

LOG_COLOURS: Final = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}  # default_log_colors


class _Formatter:  # format asctime with millisecond precision
    """Formatter instances convert a LogRecord to text."""

    default_time_format = DEFAULT_DATEFMT

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Return the creation time (asctime) of the LogRecord as formatted text.

        Uses datetime rather than time objects, to allow for sub-second precision.
        """
        result = dt.fromtimestamp(record.created).strftime(
            datefmt or self.default_time_format
        )
        return result[:-3] if result[-7:-6] == "." else result  # .ffffff -> .fff


class ColoredFormatter(_Formatter, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class Formatter(_Formatter, logging.Formatter):  # type: ignore[misc]
    pass


class StdErrFilter(logging.Filter):  # record.levelno >= logging.WARNING
    """For sys.stderr, process only warnings (and worse)."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return True if the record is to be processed."""  # WARNING-30, ERROR-40
        return record.levelno >= logging.WARNING


class StdOutFilter(logging.Filter):  # record.levelno < logging.WARNING
    """For sys.stdout, process only info (and debug)."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return True if the record is to be processed."""  # INFO-20, DEBUG-10
        return record.levelno < logging.WARNING


def set_logging(
    logger: logging.Logger,
    level: int = logging.INFO,
    *,
    use_color: bool = True,
) -> None:
    """Create/configure the console handlers (stdout/stderr) of a logger."""

    logger.setLevel(level)

    # as set_logging() may be called several times: to avoid duplicates in logs...
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_fmt: ColoredFormatter | Formatter
    if use_color:
        console_fmt = ColoredFormatter(
            fmt=f"%(log_color)s{DEFAULT_FMT}",
            reset=True,
            log_colors=LOG_COLOURS,
        )
    else:
        console_fmt = Formatter(fmt=DEFAULT_FMT)

    handler: logging.Handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(console_fmt)
    handler.setLevel(logging.WARNING)
    handler.addFilter(StdErrFilter())  # record.levelno >= .WARNING
    logger.addHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(console_fmt)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(StdOutFilter())  # record.levelno < .WARNING
    logger.addHandler(handler)

    logger.debug("intesisbox %s: logging is configured", VERSION)
