"""
Proclog Configuration Module.

Implements the Nested Settings Pattern for orthogonal configuration domains.
Each sub-module represents an independent concern with its own environment variable prefix.

Multi-Environment Support:
    Set `PROCLOG_ENV` to one of: development, testing, production
    The system will load .env files in this order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from proclog.config import settings

    settings.logging.max_files       # 5
    settings.log_levels.root_daemon  # LogLevel.INFO
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .logging import LoggingSettings, LogLevel, LogLevelsSettings


def _get_env_files() -> tuple[str, ...]:
    """
    Determine which .env files to load based on PROCLOG_ENV.

    This function is called at module import time to configure the Settings class.
    """
    env = os.getenv("PROCLOG_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """
    Composite settings aggregating all orthogonal configuration domains.

    Sub-settings are loaded lazily, each from its own env prefix, the first
    time they are accessed.
    """

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def app(self) -> AppSettings:
        return AppSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @cached_property
    def log_levels(self) -> LogLevelsSettings:
        return LogLevelsSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AppSettings",
    "LoggingSettings",
    "LogLevel",
    "LogLevelsSettings",
]
