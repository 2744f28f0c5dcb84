"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file). Records
    that carry a ``guild_id`` extra get it prefixed to the message.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, *args, stream=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        guild_id = getattr(record, "guild_id", None)
        color = self.COLORS.get(record.levelno, "") if self._use_color() else ""
        if color or guild_id is not None:
            record = logging.makeLogRecord(record.__dict__)
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        if guild_id is not None:
            record.msg = f"[guild {guild_id}] {record.msg}"
        return super().format(record)
