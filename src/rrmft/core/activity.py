"""User-visible activity log.

Entries are append-only and ordered. When the log grows past `LOG_CAP`
entries it is cut back to the most recent `LOG_KEEP`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, Iterator, Mapping

LOG_CAP = 100
LOG_KEEP = 50

SEVERITIES: tuple[str, ...] = ("info", "success", "warning", "error")

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

logger = logging.getLogger("rrmft.activity")


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    message: str
    type: str = "info"

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "LogEntry":
        if not isinstance(obj, Mapping):
            raise ValueError(f"log entry: expected JSON object, got {type(obj).__name__}")
        return cls(
            timestamp=str(obj.get("timestamp", "")),
            message=str(obj.get("message", "")),
            type=str(obj.get("type", "info")),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def render(self) -> str:
        return f"[{self.timestamp}] {self.message}"


class ActivityLog:
    """Bounded, ordered activity log that also forwards to `logging`."""

    def __init__(self, entries: Iterable[LogEntry] = ()):
        self._entries: list[LogEntry] = list(entries)
        self._trim()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def _trim(self) -> None:
        if len(self._entries) > LOG_CAP:
            self._entries = self._entries[-LOG_KEEP:]

    def append(self, entry: LogEntry) -> LogEntry:
        if entry.type not in SEVERITIES:
            raise ValueError(f"log entry type must be one of {list(SEVERITIES)}, got {entry.type!r}")
        self._entries.append(entry)
        self._trim()
        logger.log(_LEVELS[entry.type], entry.message)
        return entry

    def add(self, message: str, type: str = "info", *, now: datetime | None = None) -> LogEntry:
        ts = (now or datetime.now()).strftime("%H:%M:%S")
        return self.append(LogEntry(timestamp=ts, message=message, type=type))

    def recent(self, n: int) -> list[LogEntry]:
        if n <= 0:
            return []
        return self._entries[-n:]

    def replace(self, entries: Iterable[LogEntry]) -> None:
        """Full overwrite (project load)."""
        self._entries = list(entries)
        self._trim()

    def render(self) -> str:
        return "\n".join(e.render() for e in self._entries)
