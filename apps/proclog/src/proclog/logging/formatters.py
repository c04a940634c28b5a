"""
Log line rendering and color utilities.
"""

from __future__ import annotations

from datetime import datetime

from structlog.typing import EventDict, WrappedLogger

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "trace": "\033[2;36m",
    "debug": "\033[36m",
    "info": "\033[32m",
    "warning": "\033[33m",
    "error": "\033[31m",
    "fatal": "\033[1;31m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}

# structlog names that are displayed differently
_LEVEL_ALIASES = {"critical": "fatal", "exception": "error", "warn": "warning"}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def format_timestamp(dt: datetime, fmt: str) -> str:
    """strftime, except that %f yields four fractional digits."""
    if "%f" in fmt:
        fmt = fmt.replace("%f", f"{dt.microsecond // 100:04d}")
    return dt.strftime(fmt)


class TextRenderer:
    """
    structlog processor rendering one plain-text line per event.

    Layout: `<timestamp> <level> <logger> : <event> key=value ... (<file>:<line>)`.
    The level is always the first field after the timestamp and is never
    colored in files, so tools reading the file back can rely on its position.
    """

    EXCLUDED_KEYS = {
        "level",
        "event",
        "logger",
        "timestamp",
        "filename",
        "lineno",
        "func_name",
        "exception",
        "stack",
    }
    LEVEL_WIDTH = 5

    def __init__(self, timestamp_format: str, *, use_color: bool = False) -> None:
        self.timestamp_format = timestamp_format
        self.use_color = use_color

    def _maybe_color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return colorize(text, color)

    def _timestamp(self, value: object) -> str:
        dt = value if isinstance(value, datetime) else datetime.now()
        return format_timestamp(dt, self.timestamp_format)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        level = str(event_dict.get("level", method_name)).lower()
        level = _LEVEL_ALIASES.get(level, level)

        parts = [
            self._maybe_color(self._timestamp(event_dict.get("timestamp")), "timestamp"),
            self._maybe_color(f"{level:<{self.LEVEL_WIDTH}}", level),
            self._maybe_color(str(event_dict.get("logger", "root")), "logger"),
            ":",
            str(event_dict.get("event", "")),
        ]

        for k, v in event_dict.items():
            if k not in self.EXCLUDED_KEYS:
                parts.append(f"{self._maybe_color(k, 'key')}={self._maybe_color(str(v), 'dim')}")

        filename = event_dict.get("filename")
        if filename:
            parts.append(self._maybe_color(f"({filename}:{event_dict.get('lineno', '?')})", "dim"))

        line = " ".join(parts)
        for key in ("stack", "exception"):
            extra = event_dict.get(key)
            if extra:
                line += "\n" + str(extra).rstrip("\n")
        return line
