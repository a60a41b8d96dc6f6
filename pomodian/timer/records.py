"""Completed-session records and the in-memory session log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, Protocol

from .engine import Mode


@dataclass(frozen=True)
class SessionRecord:
    """One interval that ran down to zero.  Never created for a reset."""

    timestamp: datetime        # UTC, timezone-aware
    mode: Mode
    duration_seconds: int

    def __post_init__(self) -> None:
        if self.duration_seconds <= 0:
            raise ValueError("duration_seconds must be greater than zero")
        if self.timestamp.tzinfo is None:
            object.__setattr__(
                self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc)
            )


class SessionSink(Protocol):
    """Anything the orchestrator can append completed sessions to."""

    def append(self, record: SessionRecord) -> None: ...


class SessionLog:
    """Append-only, process-local session log."""

    def __init__(self, records: list[SessionRecord] | None = None) -> None:
        self._records: list[SessionRecord] = list(records or [])

    def append(self, record: SessionRecord) -> None:
        self._records.append(record)

    def records(self) -> list[SessionRecord]:
        return list(self._records)

    def __iter__(self) -> Iterator[SessionRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
