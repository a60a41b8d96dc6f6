"""Append-only session log backed by the database."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from ..stats import FocusStats, StatsPeriod, focus_stats
from ..timer.engine import Mode
from ..timer.records import SessionRecord
from .db import get_session
from .models import Session


logger = logging.getLogger(__name__)


class SessionStore:
    """Persists completed sessions handed over by the orchestrator.

    Pass an instance as ``session_log`` to :class:`SessionOrchestrator`.
    """

    def append(self, record: SessionRecord) -> None:
        with get_session() as db:
            db.add(Session(
                timestamp=record.timestamp.astimezone(timezone.utc).replace(tzinfo=None),
                mode=record.mode.value,
                duration_seconds=record.duration_seconds,
            ))
        logger.debug("Stored %s session (%ss)", record.mode.value, record.duration_seconds)

    def records(self) -> list[SessionRecord]:
        """Every stored session, oldest first."""
        with get_session() as db:
            rows = db.query(Session).order_by(Session.timestamp, Session.id).all()
            return [
                SessionRecord(
                    timestamp=row.timestamp.replace(tzinfo=timezone.utc),
                    mode=Mode(row.mode),
                    duration_seconds=row.duration_seconds,
                )
                for row in rows
            ]

    def stats(
        self,
        period: StatsPeriod,
        reference: datetime | date | None = None,
    ) -> FocusStats:
        """Re-derive *period* statistics from the full log."""
        return focus_stats(self.records(), period, reference)

    def __len__(self) -> int:
        with get_session() as db:
            return db.query(Session).count()
