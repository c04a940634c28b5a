"""
init_logging tests: destination choice, role thresholds and failure modes.
"""

from __future__ import annotations

import io
import logging
import re
import sys

import pytest

from proclog.config import LogLevel, Settings
from proclog.logging import summarize_log
from proclog.logging.exceptions import DirectoryResolutionError, SinkCreationError
from proclog.logging.roles import ProcessRole
from proclog.logging.rotation import RotatingFileSink
from proclog.logging.selector import init_logging
from proclog.logging.sinks import TerminalSink

_ANSI = re.compile(r"\x1b\[[0-9;]*m")
_FILE_PREFIX = re.compile(r"^\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}\.\d{4} ")


def _file_lines(ctx) -> list[str]:
    ctx.sink.flush()
    return ctx.log_file.read_text().splitlines()


class TestTerminalDestination:
    def test_writes_to_terminal(self, settings, terminal, log_dir) -> None:
        ctx = init_logging("connector", settings=settings, stdout=terminal)
        ctx.logger.info("ready")

        assert isinstance(ctx.sink, TerminalSink)
        assert ctx.log_file is None
        assert not log_dir.exists()

        lines = _ANSI.sub("", terminal.getvalue()).splitlines()
        assert any("ready" in line for line in lines)
        assert all(re.match(r"^\d{2}:\d{2}:\d{2}\.\d{4} ", line) for line in lines)

    def test_directory_is_not_needed(self, terminal, monkeypatch) -> None:
        def broken(*args, **kwargs):
            raise OSError("no profile")

        monkeypatch.setattr("proclog.logging.location.platformdirs.user_log_dir", broken)
        ctx = init_logging("daemon", settings=Settings(), stdout=terminal)
        assert ctx.log_file is None


class TestFileDestination:
    def test_log_file_location_and_format(self, settings, log_dir) -> None:
        ctx = init_logging("daemon", settings=settings, stdout=io.StringIO())
        ctx.logger.info("hello", peer="10.0.0.1")
        ctx.close()

        assert isinstance(ctx.sink, RotatingFileSink)
        assert ctx.log_file == log_dir / "daemon.log"
        lines = _file_lines(ctx)
        assert all(_FILE_PREFIX.match(line) for line in lines)

        hello = [line for line in lines if "hello" in line]
        assert len(hello) == 1
        assert hello[0].split()[2] == "info"
        assert "peer=10.0.0.1" in hello[0]
        assert "(test_selector.py:" in hello[0]
        assert "\x1b[" not in hello[0]

    def test_config_loading_is_logged_at_debug(self, settings) -> None:
        ctx = init_logging("daemon", settings=settings, stdout=io.StringIO())
        ctx.close()
        lines = _file_lines(ctx)
        assert any(" debug " in line and "applying configured log level" in line for line in lines)

    def test_previous_log_is_rotated(self, settings, log_dir) -> None:
        first = init_logging("daemon", settings=settings, stdout=io.StringIO())
        first.logger.info("first run")
        first.close()

        second = init_logging("daemon", settings=settings, stdout=io.StringIO())
        second.close()

        assert "first run" not in second.log_file.read_text()
        assert len(list(log_dir.glob("daemon-*.log.gz"))) == 1

    def test_max_files_override(self, settings, log_dir, monkeypatch) -> None:
        monkeypatch.setenv("PROCLOG_MAX_LOGFILES", "1")
        for run in range(3):
            ctx = init_logging("daemon", settings=Settings(), stdout=io.StringIO())
            ctx.logger.info("run", n=run)
            ctx.close()
        assert list(log_dir.glob("daemon-*")) == []

    def test_errors_are_found_by_digest(self, settings) -> None:
        ctx = init_logging("connector", settings=settings, stdout=io.StringIO())
        ctx.logger.info("before")
        ctx.logger.error("connection refused", port=8080)
        ctx.logger.info("after")
        ctx.close()

        digest = summarize_log("connector", settings=settings)
        assert digest.startswith(f"Last error from {ctx.log_file}:\n\n")
        assert "connection refused port=8080" in digest
        assert "after" not in digest

    def test_unresolvable_directory(self, monkeypatch) -> None:
        def broken(*args, **kwargs):
            raise OSError("no profile")

        monkeypatch.setattr("proclog.logging.location.platformdirs.user_log_dir", broken)
        with pytest.raises(DirectoryResolutionError):
            init_logging("daemon", settings=Settings(), stdout=io.StringIO())

    def test_unopenable_sink(self, settings, log_dir) -> None:
        log_dir.parent.mkdir(parents=True, exist_ok=True)
        log_dir.write_text("in the way")
        with pytest.raises(SinkCreationError):
            init_logging("daemon", settings=settings, stdout=io.StringIO())


class TestThresholds:
    @pytest.mark.parametrize(
        ("name", "role", "level"),
        [
            ("daemon", ProcessRole.ROOT_DAEMON, LogLevel.INFO),
            ("connector", ProcessRole.USER_DAEMON, LogLevel.DEBUG),
            ("cli", ProcessRole.OTHER, LogLevel.DEBUG),
        ],
    )
    def test_default_levels(self, settings, name, role, level) -> None:
        ctx = init_logging(name, settings=settings, stdout=io.StringIO())
        ctx.close()
        assert ctx.role is role
        assert ctx.level is level

    def test_threshold_filters(self, settings, monkeypatch) -> None:
        monkeypatch.setenv("PROCLOG_LOG_LEVELS_USER_DAEMON", "warning")
        ctx = init_logging("connector", settings=settings, stdout=io.StringIO())
        ctx.logger.info("hidden")
        ctx.logger.warning("shown")
        ctx.close()

        text = ctx.log_file.read_text()
        assert "hidden" not in text
        assert "shown" in text

    def test_explicit_role(self, settings, monkeypatch) -> None:
        monkeypatch.setenv("PROCLOG_LOG_LEVELS_ROOT_DAEMON", "error")
        ctx = init_logging("privileged", role=ProcessRole.ROOT_DAEMON, settings=settings, stdout=io.StringIO())
        ctx.close()
        assert ctx.level is LogLevel.ERROR
        assert ctx.log_file.name == "privileged.log"

    def test_stdlib_records_are_redirected(self, settings) -> None:
        ctx = init_logging("daemon", settings=settings, stdout=io.StringIO())
        logging.getLogger("vendor.transport.http").warning("retrying %s", "GET /")
        logging.getLogger("vendor").debug("too chatty")
        ctx.close()

        text = ctx.log_file.read_text()
        assert "transport.http : retrying GET /" in text
        assert "too chatty" not in text

    def test_child_logger(self, settings) -> None:
        ctx = init_logging("cli", settings=settings, stdout=io.StringIO())
        ctx.get_logger("cli.updater").debug("checking")
        ctx.close()
        assert "cli.updater : checking" in ctx.log_file.read_text()


def test_empty_name_rejected(settings) -> None:
    with pytest.raises(ValueError):
        init_logging("", settings=settings, stdout=io.StringIO())


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_octal_file_mode_from_env(settings, monkeypatch) -> None:
    monkeypatch.setenv("PROCLOG_LOG_FILE_MODE", "0640")
    ctx = init_logging("daemon", settings=Settings(), stdout=io.StringIO())
    ctx.close()
    assert ctx.log_file.stat().st_mode & 0o7777 == 0o640
