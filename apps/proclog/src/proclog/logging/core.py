"""
Core structlog pipeline: processors and logger construction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from proclog.config.logging import LogLevel

from .formatters import TextRenderer
from .sinks import BaseSink

# Frames skipped when locating the caller of a log call.
_CALLSITE_IGNORES = ["logging", "proclog.logging.interceptors"]


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the local time of the event; rendering formats it."""
    event_dict["timestamp"] = datetime.now()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def build_processors(renderer: TextRenderer) -> list[Any]:
    return [
        structlog.processors.add_log_level,
        add_timestamp,
        add_logger_name,
        structlog.processors.CallsiteParameterAdder(
            [
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ],
            additional_ignores=_CALLSITE_IGNORES,
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def build_logger(
    sink: BaseSink,
    renderer: TextRenderer,
    level: LogLevel,
    *,
    name: str = "root",
) -> Any:
    """
    Create a bound logger that renders with `renderer` into `sink`.

    Nothing global is configured; the logger is only reachable through the
    returned handle.
    """
    return structlog.wrap_logger(
        structlog.PrintLogger(file=sink),
        processors=build_processors(renderer),
        wrapper_class=structlog.make_filtering_bound_logger(level.numeric),
        context_class=dict,
    ).bind(_name=name)
