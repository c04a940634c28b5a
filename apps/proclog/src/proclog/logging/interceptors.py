"""
Interceptors for capturing standard library and third-party logs.
"""

import logging
from typing import Any


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events to a structlog logger.
    This ensures third-party logs land in the same sink, filtered by the
    same threshold, as the process's own logs.
    """

    def __init__(self, logger: Any, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Format message using stdlib's formatting (handles %s args)
            msg = self.format(record)
            logger = self._logger.bind(_name=self._simplify_logger_name(record.name))
            logger.log(getattr(logging, record.levelname, logging.INFO), msg)
        except Exception:
            self.handleError(record)

    @staticmethod
    def _simplify_logger_name(name: str) -> str:
        """
        Simplify a logger name for display.

        Rules:
        - "" -> "stdlib"
        - "urllib3.connectionpool" -> "urllib3.connectionpool"
        - Other -> keep last 2 parts
        """
        if not name or name == "root":
            return "stdlib"

        parts = name.split(".")
        if len(parts) <= 2:
            return name
        return ".".join(parts[-2:])


def install_stdlib_redirect(logger: Any, level: int) -> RedirectStdLibHandler:
    """Route every stdlib log record through `logger`, replacing root handlers."""
    handler = RedirectStdLibHandler(logger)
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
