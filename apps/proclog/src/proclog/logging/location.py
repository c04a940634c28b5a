"""
Per-user log directory resolution.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import platformdirs

from .exceptions import DirectoryResolutionError

if TYPE_CHECKING:
    from proclog.config import Settings


def resolve_log_dir(settings: Settings | None = None) -> Path:
    """
    Return the directory holding `<process-name>.log` files.

    An explicit `PROCLOG_LOG_DIR` wins; otherwise platformdirs picks the
    platform's user log location (e.g. ~/.local/state/<app>/log on Linux,
    ~/Library/Logs/<app> on macOS). The directory is not created.
    """
    if settings is None:
        from proclog.config import settings

    override = settings.logging.dir
    if override is not None:
        return Path(override).expanduser()

    app_name = settings.app.name
    try:
        log_dir = Path(platformdirs.user_log_dir(app_name, appauthor=False))
    except (OSError, KeyError, RuntimeError) as exc:
        raise DirectoryResolutionError(app_name=app_name, reason=str(exc)) from exc

    # expanduser leaves "~" in place when no home directory can be found
    if not log_dir.is_absolute():
        raise DirectoryResolutionError(
            app_name=app_name,
            reason=f"user home directory is unknown (got '{log_dir}')",
        )
    return log_dir


def log_file_path(log_dir: Path, process_name: str) -> Path:
    """`<log-dir>/<process-name>.log`, shared by writers and digests."""
    return log_dir / f"{process_name}.log"
