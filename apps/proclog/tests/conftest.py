import io
import logging
from pathlib import Path

import pytest

from proclog.config import Settings
from proclog.logging.interceptors import RedirectStdLibHandler

_ENV_VARS = (
    "PROCLOG_LOG_DIR",
    "PROCLOG_MAX_LOGFILES",
    "PROCLOG_LOG_MAX_FILES",
    "MAX_FILES",
    "PROCLOG_LOG_FILE_MODE",
    "PROCLOG_LOG_LEVELS_ROOT_DAEMON",
    "PROCLOG_LOG_LEVELS_USER_DAEMON",
    "PROCLOG_APP_NAME",
)


class FakeTerminal(io.StringIO):
    """In-memory stream that claims to be a TTY."""

    def isatty(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the settings under test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the root logger changes made by init_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler, RedirectStdLibHandler):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def log_dir(tmp_path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def settings(log_dir, monkeypatch) -> Settings:
    monkeypatch.setenv("PROCLOG_LOG_DIR", str(log_dir))
    return Settings()


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def write_log(log_dir):
    """Write `<log_dir>/<name>.log` with the given lines and return its path."""

    def _write(name: str, lines: list[str]) -> Path:
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / f"{name}.log"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write
