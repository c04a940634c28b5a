"""
Process roles and how they are recognised from a process name.
"""

from __future__ import annotations

from enum import Enum


class ProcessRole(str, Enum):
    ROOT_DAEMON = "daemon"
    USER_DAEMON = "connector"
    OTHER = "other"

    @classmethod
    def from_process_name(cls, name: str) -> ProcessRole:
        """Exact match on the process name; anything unknown is OTHER."""
        if name == cls.ROOT_DAEMON.value:
            return cls.ROOT_DAEMON
        if name == cls.USER_DAEMON.value:
            return cls.USER_DAEMON
        return cls.OTHER
