"""
Rotating file sink.

On open, the previous `<name>.log` is renamed to `<name>-<timestamp>.log`
(gzip compressed when requested) and the oldest rotated copies beyond the
retention count are removed.
"""

from __future__ import annotations

import gzip
import os
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TextIO

from .exceptions import SinkCreationError
from .sinks import BaseSink

_GZ = ".gz"


# =============================================================================
# Rotation Strategies
# =============================================================================


class RotationStrategy(ABC):
    """Decides, after each write, whether the live file must be rotated."""

    @abstractmethod
    def should_rotate(self, sink: RotatingFileSink) -> bool:
        ...


class RotateOnce(RotationStrategy):
    """Rotation happens only when the file is opened."""

    def should_rotate(self, sink: RotatingFileSink) -> bool:
        return False


class RotateOnSize(RotationStrategy):
    """Rotate whenever the live file grows past `max_bytes`."""

    def __init__(self, max_bytes: int = 10 * 1024 * 1024):
        self.max_bytes = max_bytes

    def should_rotate(self, sink: RotatingFileSink) -> bool:
        return sink.size > self.max_bytes


@dataclass(frozen=True)
class RotationConfig:
    path: Path
    timestamp_pattern: str = "%Y%m%dT%H%M%S"
    rotate_on_open: bool = True
    compress: bool = True
    file_mode: int = 0o600
    strategy: RotationStrategy = field(default_factory=RotateOnce)
    # total files kept, live file included; 0 disables pruning
    max_files: int = 5


# =============================================================================
# Sink
# =============================================================================


class RotatingFileSink(BaseSink):
    """Local file sink with rotation on open."""

    def __init__(self, config: RotationConfig):
        self._config = config
        self._path = Path(config.path)
        self._file: TextIO | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if config.rotate_on_open:
                self._rotate_existing()
            self._file = self._open()
        except OSError as exc:
            raise SinkCreationError(path=self._path, reason=exc.strerror or str(exc)) from exc

    @property
    def path(self) -> Path:
        return self._path

    @property
    def size(self) -> int:
        """Current size of the live file in bytes."""
        if self._file is None:
            return 0
        self._file.flush()
        return os.fstat(self._file.fileno()).st_size

    def write(self, text: str) -> None:
        if self._file is None:
            raise ValueError(f"write to closed log file {self._path}")
        self._file.write(text)
        if self._config.strategy.should_rotate(self):
            self.rotate()

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def rotate(self) -> None:
        """Close the live file, rotate it away and start a fresh one."""
        self.close()
        self._rotate_existing()
        self._file = self._open()

    def rotated_files(self) -> list[Path]:
        """Rotated copies of this log, oldest first."""
        found = [p for p in self._path.parent.iterdir() if self._is_rotated_copy(p.name)]
        return sorted(found, key=lambda p: (p.stat().st_mtime, p.name))

    # ---------------------------------------------------------------------

    def _open(self) -> TextIO:
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, self._config.file_mode)
        try:
            # the mode given to os.open is masked by umask and ignored for existing files
            os.chmod(self._path, self._config.file_mode)
            return os.fdopen(fd, "a", encoding="utf-8")
        except BaseException:
            os.close(fd)
            raise

    def _rotate_existing(self) -> None:
        try:
            st = self._path.stat()
        except FileNotFoundError:
            return
        if st.st_size > 0:
            stamp = datetime.fromtimestamp(st.st_mtime).strftime(self._config.timestamp_pattern)
            target = self._backup_path(stamp)
            self._path.rename(target)
            if self._config.compress:
                self._compress(target)
        self._prune()

    def _backup_path(self, stamp: str) -> Path:
        stem, suffix = self._path.stem, self._path.suffix
        candidate = self._path.with_name(f"{stem}-{stamp}{suffix}")
        n = 0
        while candidate.exists() or candidate.with_name(candidate.name + _GZ).exists():
            n += 1
            candidate = self._path.with_name(f"{stem}-{stamp}-{n}{suffix}")
        return candidate

    def _compress(self, target: Path) -> None:
        gz_path = target.with_name(target.name + _GZ)
        try:
            with target.open("rb") as src, gzip.open(gz_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            os.chmod(gz_path, self._config.file_mode)
            st = target.stat()
            os.utime(gz_path, (st.st_atime, st.st_mtime))
        except BaseException:
            # a truncated archive would be mistaken for a rotated copy
            gz_path.unlink(missing_ok=True)
            raise
        target.unlink()

    def _prune(self) -> None:
        max_files = self._config.max_files
        if max_files <= 0:
            return
        backups = self.rotated_files()
        excess = len(backups) - (max_files - 1)
        for old in backups[:max(excess, 0)]:
            old.unlink()

    def _is_rotated_copy(self, name: str) -> bool:
        stem, suffix = self._path.stem, self._path.suffix
        if name.endswith(_GZ):
            name = name[: -len(_GZ)]
        if not (name.startswith(stem + "-") and name.endswith(suffix)):
            return False
        stamp = name[len(stem) + 1 : len(name) - len(suffix)]
        candidates = [stamp]
        head, sep, tail = stamp.rpartition("-")
        if sep and tail.isdigit():
            candidates.append(head)
        return any(self._parses_as_stamp(c) for c in candidates)

    def _parses_as_stamp(self, text: str) -> bool:
        try:
            datetime.strptime(text, self._config.timestamp_pattern)
        except ValueError:
            return False
        return True
