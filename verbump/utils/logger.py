"""
Diagnostic logging for verbump.

Modules log through ``get_logger(<name>)`` into the ``verbump`` logger
tree, which stays silent until the CLI calls :func:`setup_logging`.
"""

from __future__ import annotations

import os
import sys
import logging
from typing import IO, Optional

from verbump.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER = "verbump"

#: ANSI color per level, applied to the level name only.
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal.

    Whether to color is decided once, from ``NO_COLOR`` and whether
    *stream* is a tty.
    """

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = _is_color_stream(stream)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not self.use_color or color is None:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{RESET}", 1)


def _is_color_stream(stream: Optional[IO[str]]) -> bool:
    if stream is None or os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_logging(
    *,
    level: int = logging.WARNING,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send verbump logs to *stream* (stderr by default).

    Replaces any handler from an earlier call. ``verbose`` adds
    timestamps and logger names.
    """
    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        ColoredFormatter(
            LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            stream=stream,
        )
    )

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``verbump.<name>``; *name* may already carry the prefix."""
    if not name or name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name or ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
