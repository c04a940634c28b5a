"""
Per-process log initialisation.

Chooses where a process logs (its terminal, or a rotating file under the
per-user log directory) and applies the threshold configured for its role.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from proclog.config.logging import LogLevel

from .core import build_logger
from .formatters import TextRenderer
from .interceptors import install_stdlib_redirect
from .location import log_file_path, resolve_log_dir
from .roles import ProcessRole
from .rotation import RotateOnce, RotatingFileSink, RotationConfig
from .sinks import BaseSink, TerminalSink, is_terminal

if TYPE_CHECKING:
    from proclog.config import Settings

# Config loading happens at this level so that it is always visible.
INITIAL_LEVEL = LogLevel.DEBUG


@dataclass(frozen=True)
class LoggingContext:
    """Logging handle of a process, created once at startup and passed down."""

    process_name: str
    role: ProcessRole
    level: LogLevel
    logger: Any
    sink: BaseSink
    log_file: Path | None = None

    def get_logger(self, name: str) -> Any:
        """A logger sharing this process's sink and threshold."""
        return self.logger.bind(_name=name)

    def close(self) -> None:
        self.sink.close()


def _open_file_sink(settings: Settings, process_name: str) -> RotatingFileSink:
    cfg = settings.logging
    return RotatingFileSink(
        RotationConfig(
            path=log_file_path(resolve_log_dir(settings), process_name),
            timestamp_pattern=cfg.rotation_timestamp_format,
            rotate_on_open=True,
            compress=True,
            file_mode=cfg.file_mode,
            strategy=RotateOnce(),
            max_files=cfg.max_files,
        )
    )


def init_logging(
    process_name: str,
    *,
    role: ProcessRole | None = None,
    settings: Settings | None = None,
    stdout: TextIO | None = None,
) -> LoggingContext:
    """
    Set up logging for a background process.

    Args:
        process_name: Name of the process; selects the role when `role` is not
            given and names the log file (`<log-dir>/<process_name>.log`).
        role: Explicit process role.
        settings: Settings to read; defaults to the global settings.
        stdout: Stream inspected for a terminal (default: sys.stdout).

    Raises:
        DirectoryResolutionError: the per-user log directory is unknown.
        SinkCreationError: the log file could not be opened.
    """
    if not process_name:
        raise ValueError("process_name must not be empty")
    if settings is None:
        from proclog.config import settings
    if role is None:
        role = ProcessRole.from_process_name(process_name)
    stream = stdout if stdout is not None else sys.stdout

    sink: BaseSink
    log_file: Path | None = None
    if is_terminal(stream):
        sink = TerminalSink(stream)
        renderer = TextRenderer(settings.logging.terminal_timestamp_format, use_color=True)
    else:
        file_sink = _open_file_sink(settings, process_name)
        sink, log_file = file_sink, file_sink.path
        renderer = TextRenderer(settings.logging.file_timestamp_format)

    try:
        logger = build_logger(sink, renderer, INITIAL_LEVEL, name=process_name)
        logger.debug("logging initialized", destination=str(log_file or "terminal"))

        level = INITIAL_LEVEL
        configured = settings.log_levels.for_role(role)
        if configured is not None:
            level = configured
            logger.debug("applying configured log level", role=role.value, level=level.value)
            logger = build_logger(sink, renderer, level, name=process_name)

        install_stdlib_redirect(logger, level.numeric)
    except BaseException:
        sink.close()
        raise

    return LoggingContext(
        process_name=process_name,
        role=role,
        level=level,
        logger=logger,
        sink=sink,
        log_file=log_file,
    )
