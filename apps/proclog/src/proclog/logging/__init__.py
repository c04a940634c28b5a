"""
Per-process logging for background client processes.

- init_logging: picks the terminal or a rotating file under the per-user log
  directory and applies the log level configured for the process role.
- summarize_log: bounded digest of a process's most recent log lines,
  favouring error lines.

Library: structlog for the logging pipeline, platformdirs for the log
directory, pydantic-settings for configuration.
"""

from .digest import DigestResult, RingBuffer, is_error_line, scan_log, summarize_log
from .exceptions import DirectoryResolutionError, ProcLogError, ReadError, SinkCreationError
from .location import resolve_log_dir
from .roles import ProcessRole
from .selector import LoggingContext, init_logging

__all__ = [
    "DigestResult",
    "DirectoryResolutionError",
    "LoggingContext",
    "ProcLogError",
    "ProcessRole",
    "ReadError",
    "RingBuffer",
    "SinkCreationError",
    "init_logging",
    "is_error_line",
    "resolve_log_dir",
    "scan_log",
    "summarize_log",
]
