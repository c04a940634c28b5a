"""
Log sink abstractions.

A sink is a minimal file-like object; structlog's PrintLogger writes each
rendered line to it followed by a flush.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Any, TextIO


def is_terminal(stream: Any) -> bool:
    """Whether `stream` is attached to an interactive terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (ValueError, OSError):
        # closed or detached streams are not terminals
        return False


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write rendered log text."""
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...

    def isatty(self) -> bool:
        return False


class TerminalSink(BaseSink):
    """Writes to the controlling terminal (stdout by default). Never closes it."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream or sys.stdout

    def write(self, text: str) -> None:
        self._stream.write(text)

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self.flush()

    def isatty(self) -> bool:
        return is_terminal(self._stream)
