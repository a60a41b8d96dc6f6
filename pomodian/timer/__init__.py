"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    TimerSnapshot,
    Mode,
    TICK_INTERVAL_MS,
)
from .records import SessionRecord, SessionLog
from .orchestrator import SessionOrchestrator, next_mode_after

__all__ = [
    "TimerEngine",
    "TimerState",
    "TimerSnapshot",
    "Mode",
    "TICK_INTERVAL_MS",
    "SessionRecord",
    "SessionLog",
    "SessionOrchestrator",
    "next_mode_after",
]
