"""Tests for the database-backed session log."""

from datetime import datetime, timedelta, timezone

import pytest

from pomodian.database.db import configure_engine, get_session, init_db
from pomodian.database.models import Session
from pomodian.database.store import SessionStore
from pomodian.settings import Settings
from pomodian.stats import StatsPeriod
from pomodian.timer.engine import Mode
from pomodian.timer.orchestrator import SessionOrchestrator
from pomodian.timer.records import SessionRecord

from helpers import complete_session


STAMP = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)


class TestSessionStore:

    def test_append_writes_a_row(self):
        store = SessionStore()
        store.append(SessionRecord(STAMP, Mode.WORK, 1500))

        with get_session() as db:
            row = db.query(Session).one()
            assert row.mode == "work"
            assert row.duration_seconds == 1500
            assert row.timestamp == STAMP.replace(tzinfo=None)

    def test_records_round_trip_in_order(self):
        store = SessionStore()
        later = SessionRecord(STAMP + timedelta(hours=1), Mode.SHORT_BREAK, 300)
        earlier = SessionRecord(STAMP, Mode.WORK, 1500)
        store.append(later)
        store.append(earlier)

        assert store.records() == [earlier, later]
        assert store.records()[0].timestamp.tzinfo is not None
        assert len(store) == 2

    def test_non_utc_timestamp_stored_as_utc(self):
        store = SessionStore()
        plus_two = timezone(timedelta(hours=2))
        store.append(SessionRecord(datetime(2026, 3, 4, 14, 0, tzinfo=plus_two), Mode.WORK, 600))
        assert store.records()[0].timestamp == STAMP

    def test_stats_from_store(self):
        store = SessionStore()
        store.append(SessionRecord(STAMP, Mode.WORK, 1500))
        store.append(SessionRecord(STAMP, Mode.SHORT_BREAK, 300))
        store.append(SessionRecord(STAMP - timedelta(days=2), Mode.WORK, 900))

        weekly = store.stats(StatsPeriod.WEEKLY, STAMP)
        assert weekly.completed_count == 2
        assert weekly.total_focus_seconds == 2400

    def test_orchestrator_persists_completed_sessions(self, qapp):
        store = SessionStore()
        orch = SessionOrchestrator(Settings(), session_log=store, clock=lambda: STAMP)

        orch.start()
        complete_session(orch.engine)
        orch.acknowledge()
        orch.start()
        orch.engine._on_tick()
        orch.reset()

        assert store.records() == [SessionRecord(STAMP, Mode.WORK, 1500)]


class TestDatabase:

    def test_reconfigure_gives_fresh_database(self):
        store = SessionStore()
        store.append(SessionRecord(STAMP, Mode.WORK, 1500))
        configure_engine("sqlite:///:memory:")
        init_db()
        assert len(store) == 0

    def test_get_session_rolls_back_on_error(self):
        with pytest.raises(RuntimeError):
            with get_session() as db:
                db.add(Session(timestamp=STAMP.replace(tzinfo=None), mode="work",
                               duration_seconds=1500))
                db.flush()
                raise RuntimeError("boom")
        assert len(SessionStore()) == 0

    def test_file_database(self, tmp_path):
        configure_engine(f"sqlite:///{tmp_path / 'pomodian.db'}")
        init_db()
        SessionStore().append(SessionRecord(STAMP, Mode.WORK, 600))
        assert (tmp_path / "pomodian.db").exists()
        assert len(SessionStore()) == 1
