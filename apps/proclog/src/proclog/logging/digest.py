"""
Bounded digests of a process's recent log activity.

A digest shows the last ten error lines of a log file, or, when the file
holds no errors at all, its last ten lines:

    Last 2 errors from /home/me/.local/state/proclog/log/connector.log:

      2024/05/01 10:00:01.0042 error connector : dial failed (conn.py:88)
      2024/05/01 10:00:09.1337 error connector : giving up (conn.py:97)

The file is read without coordinating with its writer; a digest taken while
the process is still logging may end in a partial line.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Deque, Generic, Iterator, Optional, TypeVar

from .exceptions import ReadError
from .location import log_file_path, resolve_log_dir

if TYPE_CHECKING:
    from proclog.config import Settings

T = TypeVar("T")

DIGEST_CAPACITY = 10
ERROR_TOKEN = "error"


class RingBuffer(Generic[T]):
    """Fixed capacity FIFO; appending to a full buffer evicts the oldest item."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._items: Deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen or 0

    def append(self, item: T) -> Optional[T]:
        """Append `item`, returning the evicted item if the buffer was full."""
        evicted = self._items[0] if len(self._items) == self.capacity else None
        self._items.append(item)
        return evicted

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)


def is_error_line(line: str) -> bool:
    """
    Whether a rendered log line was logged at error level.

    Relies on the file layout `<date> <time> <level> ...`: the third
    whitespace-delimited field is the level name.
    """
    fields = line.split()
    return len(fields) > 2 and fields[2] == ERROR_TOKEN


@dataclass(frozen=True)
class DigestResult:
    path: Path
    lines: tuple[str, ...]
    noun: str

    @property
    def descriptor(self) -> str:
        if len(self.lines) > 1:
            return f"{len(self.lines)} {self.noun}s"
        return self.noun

    def render(self) -> str:
        if not self.lines:
            return ""
        out = [f"Last {self.descriptor} from {self.path}:\n\n"]
        out.extend(f"  {line}\n" for line in self.lines)
        return "".join(out)


def scan_log(path: str | Path, *, capacity: int = DIGEST_CAPACITY) -> DigestResult:
    """
    Scan a log file and select the lines to show.

    Raises:
        FileNotFoundError / OSError: the file cannot be opened.
        ReadError: reading failed part way through; nothing is returned.
    """
    path = Path(path)
    errors: RingBuffer[str] = RingBuffer(capacity)
    tail: RingBuffer[str] = RingBuffer(capacity)

    with path.open("r", encoding="utf-8", errors="replace", newline="\n") as f:
        try:
            for raw in f:
                line = raw[:-1] if raw.endswith("\n") else raw
                if line.endswith("\r"):
                    line = line[:-1]
                if is_error_line(line):
                    errors.append(line)
                tail.append(line)
        except OSError as exc:
            raise ReadError(path=path, reason=exc.strerror or str(exc)) from exc

    if errors:
        return DigestResult(path=path, lines=tuple(errors), noun="error")
    return DigestResult(path=path, lines=tuple(tail), noun="line")


def summarize_log(process_name: str, *, settings: Settings | None = None) -> str:
    """
    Digest text for the log of `process_name`, or "" when the log is empty.

    Raises:
        DirectoryResolutionError: the per-user log directory is unknown.
        FileNotFoundError: the process never wrote a log.
        ReadError: the log could not be read to the end.
    """
    log_file = log_file_path(resolve_log_dir(settings), process_name)
    return scan_log(log_file).render()
