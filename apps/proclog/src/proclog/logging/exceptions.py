"""
Exceptions raised by log setup and log digests.

Every error is returned to the immediate caller; this package never logs
and swallows its own failures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


class ProcLogError(Exception):
    """Root of all proclog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class DirectoryResolutionError(ProcLogError):
    """The per-user log directory could not be determined."""

    def __init__(self, *, app_name: str, reason: str) -> None:
        super().__init__(
            f"Unable to determine the log directory for '{app_name}': {reason}",
            code="LOG_DIR_UNRESOLVED",
            details={"app_name": app_name, "reason": reason},
        )


class SinkCreationError(ProcLogError):
    """The rotating log file could not be opened."""

    def __init__(self, *, path: Path, reason: str) -> None:
        super().__init__(
            f"Unable to open log file '{path}': {reason}",
            code="LOG_SINK_FAILED",
            details={"path": str(path), "reason": reason},
        )
        self.path = path


class ReadError(ProcLogError):
    """Reading a log file failed part way through."""

    def __init__(self, *, path: Path, reason: str) -> None:
        super().__init__(
            f"Error while reading log file '{path}': {reason}",
            code="LOG_READ_FAILED",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
