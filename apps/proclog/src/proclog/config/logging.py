"""
Logging Configuration.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from proclog.logging.roles import ProcessRole

DEFAULT_MAX_FILES = 5


class LogLevel(str, Enum):
    """Severity thresholds, ordered from most to least verbose."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @classmethod
    def _missing_(cls, value: object) -> LogLevel | None:
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        if name == "warn":
            return cls.WARNING
        for member in cls:
            if member.value == name:
                return member
        return None

    @property
    def numeric(self) -> int:
        """The stdlib level this threshold filters at."""
        return _NUMERIC_LEVELS[self.value]


# trace has no stdlib counterpart; it lets everything through.
_NUMERIC_LEVELS = {
    "trace": logging.NOTSET,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PROCLOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    dir: Path | None = Field(default=None, description="Override for the per-user log directory")
    max_files: int = Field(
        default=DEFAULT_MAX_FILES,
        validation_alias=AliasChoices("PROCLOG_MAX_LOGFILES", "PROCLOG_LOG_MAX_FILES"),
        description="Log files kept per process, the live one included (0 keeps all)",
    )
    file_mode: int = Field(default=0o600, description="Permission bits of created log files, octal")
    terminal_timestamp_format: str = Field(
        default="%H:%M:%S.%f",
        description="Timestamp format when logging to a terminal",
    )
    file_timestamp_format: str = Field(
        default="%Y/%m/%d %H:%M:%S.%f",
        description="Timestamp format when logging to a file",
    )
    rotation_timestamp_format: str = Field(
        default="%Y%m%dT%H%M%S",
        description="Timestamp embedded in the names of rotated files",
    )

    @field_validator("max_files", mode="before")
    @classmethod
    def _lenient_max_files(cls, value: Any) -> int:
        # Unusable overrides fall back to the default instead of failing startup.
        if isinstance(value, bool):
            return DEFAULT_MAX_FILES
        if isinstance(value, int):
            parsed = value
        else:
            try:
                parsed = int(str(value))
            except ValueError:
                return DEFAULT_MAX_FILES
        return parsed if parsed >= 0 else DEFAULT_MAX_FILES

    @field_validator("file_mode", mode="before")
    @classmethod
    def _octal_file_mode(cls, value: Any) -> int:
        # "0600" and "600" both mean rw-------, as with chmod.
        if isinstance(value, str):
            try:
                value = int(value.strip(), 8)
            except ValueError as exc:
                raise ValueError(f"file_mode must be octal permission bits, got {value!r}") from exc
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0o777:
            raise ValueError(f"file_mode must be between 0o000 and 0o777, got {value!r}")
        return value


class LogLevelsSettings(BaseSettings):
    """Severity threshold per process role."""

    model_config = SettingsConfigDict(
        env_prefix="PROCLOG_LOG_LEVELS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    root_daemon: LogLevel = Field(default=LogLevel.INFO, description="Level of the root daemon")
    user_daemon: LogLevel = Field(default=LogLevel.DEBUG, description="Level of the user daemon")

    def for_role(self, role: ProcessRole) -> LogLevel | None:
        """Return the configured threshold, or None for roles without one."""
        return {
            "daemon": self.root_daemon,
            "connector": self.user_daemon,
        }.get(role.value)
