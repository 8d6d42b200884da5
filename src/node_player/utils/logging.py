"""Console logging setup with optional level colouring."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
_RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when writing to a terminal.

    Colour is off when ``NO_COLOR`` is set or the stream is not a TTY.
    """

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, stream: TextIO | None = None) -> None:
        super().__init__(fmt or LOG_FORMAT, datefmt or DATE_FORMAT)
        self._stream = stream or sys.stderr

    @property
    def use_color(self) -> bool:
        if "NO_COLOR" in os.environ:
            return False
        isatty = getattr(self._stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{_LEVEL_COLORS.get(record.levelno, '')}{record.levelname}{_RESET}"
        return super().format(colored)


def setup_logging(log_level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Install a single colouring console handler on the ``node_player`` logger."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColoredFormatter(stream=stream))

    package_logger = logging.getLogger("node_player")
    for existing in list(package_logger.handlers):
        if getattr(existing, "_node_player_console", False):
            package_logger.removeHandler(existing)
    handler._node_player_console = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(resolved_level)
    return handler
