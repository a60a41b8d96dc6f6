"""Shared pytest fixtures for Pomodian tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from pomodian.database.db import configure_engine, init_db
from pomodian.settings import Settings
from pomodian.timer.engine import TimerEngine
from pomodian.timer.orchestrator import SessionOrchestrator


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def settings():
    """Default 25/5/15 settings, long break every 4, no auto-start."""
    return Settings()


@pytest.fixture
def engine(qapp, settings):
    """Fresh TimerEngine using the default settings."""
    return TimerEngine(settings)


@pytest.fixture
def orchestrator(qapp, settings):
    """Fresh SessionOrchestrator with an in-memory session log."""
    return SessionOrchestrator(settings)


@pytest.fixture
def orchestrator_auto(qapp):
    """Orchestrator with auto-start enabled for breaks and work."""
    return SessionOrchestrator(Settings(auto_start_breaks=True, auto_start_work=True))
