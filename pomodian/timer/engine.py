"""Countdown engine for Pomodian.

States
------
IDLE      Not counting down; remaining/total are both zero.
RUNNING   Counting down the active mode, one tick per second.
PAUSED    Countdown frozen; remaining time is kept.

The active :class:`Mode` is tracked separately from the state, so a
paused break always resumes as that same break.

Transitions
-----------
IDLE → RUNNING(mode)        (start)
RUNNING → PAUSED            (pause)
PAUSED → RUNNING            (resume)
RUNNING → IDLE              (timer reaches 0, emits ``completed``)
Any → IDLE                  (stop / reset, nothing recorded)

Commands issued in a state that does not allow them are ignored and
return ``False``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..settings import Settings


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Mode(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def is_break(self) -> bool:
        return self is not Mode.WORK


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


_MODE_LABELS: dict[Mode, str] = {
    Mode.WORK: "Focus",
    Mode.SHORT_BREAK: "Short Break",
    Mode.LONG_BREAK: "Long Break",
}

TICK_INTERVAL_MS = 1000


# ── snapshot ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable view of the countdown handed to every listener."""

    remaining_seconds: int
    total_seconds: int
    state: TimerState
    mode: Mode

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current interval."""
        if self.state == TimerState.IDLE or self.total_seconds <= 0:
            return 0.0
        elapsed = self.total_seconds - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / self.total_seconds))


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based countdown for one mode at a time.

    Signals
    -------
    tick(snapshot: TimerSnapshot)
        Emitted every second while running and on every transition.
    completed(mode: Mode, duration_seconds: int)
        Emitted once when a countdown reaches zero on its own.  Never
        emitted for a stopped or reset interval.
    """

    tick = pyqtSignal(object)
    completed = pyqtSignal(object, int)

    def __init__(
        self,
        settings: Settings | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)

        settings = replace(settings) if settings is not None else Settings()
        settings.validate()
        self._settings: Settings = settings

        self._state: TimerState = TimerState.IDLE
        self._mode: Mode = Mode.WORK
        self._remaining: int = 0
        self._total: int = 0

        # One timer object for the lifetime of the engine: restarting it
        # replaces the previous countdown instead of adding a second one.
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def mode(self) -> Mode:
        """The mode being counted down (or last counted, when IDLE)."""
        return self._mode

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def total_duration(self) -> int:
        return self._total

    @property
    def is_running(self) -> bool:
        """True when actively counting down (not IDLE, not PAUSED)."""
        return self._state == TimerState.RUNNING

    @property
    def settings(self) -> Settings:
        """A copy; pass an edited one to ``update_settings``."""
        return replace(self._settings)

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            remaining_seconds=self._remaining,
            total_seconds=self._total,
            state=self._state,
            mode=self._mode,
        )

    def update_settings(self, settings: Settings) -> None:
        """Swap the configuration used by future ``start`` calls.

        A countdown already in progress keeps its remaining and total
        seconds.  Raises :class:`InvalidConfiguration` and keeps the old
        settings if *settings* is invalid.
        """
        candidate = replace(settings)
        candidate.validate()
        self._settings = candidate

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, mode: Mode) -> bool:
        """Begin a fresh countdown for *mode*.  Only valid from IDLE."""
        if self._state != TimerState.IDLE:
            if mode != self._mode:
                logger.warning(
                    "Refusing to start %s while %s is %s",
                    mode.value, self._mode.value, self._state.value,
                )
            else:
                logger.debug("start(%s) ignored: already %s", mode.value, self._state.value)
            return False

        self._mode = mode
        self._total = self._settings.duration_seconds(mode)
        self._remaining = self._total
        logger.info("Started %s countdown (%ss)", mode.value, self._total)
        self._set_state(TimerState.RUNNING)
        self._qt_timer.start()
        return True

    def pause(self) -> bool:
        """Freeze the countdown, keeping the remaining time."""
        if self._state != TimerState.RUNNING:
            logger.debug("pause() ignored: %s", self._state.value)
            return False
        self._qt_timer.stop()
        self._set_state(TimerState.PAUSED)
        return True

    def resume(self) -> bool:
        """Continue a paused countdown from where it stopped."""
        if self._state != TimerState.PAUSED:
            logger.debug("resume() ignored: %s", self._state.value)
            return False
        self._set_state(TimerState.RUNNING)
        self._qt_timer.start()
        return True

    def stop(self) -> None:
        """Abandon the current interval and return to IDLE (unrecorded)."""
        self._qt_timer.stop()
        if self._state != TimerState.IDLE:
            logger.info(
                "Abandoned %s countdown with %ss left", self._mode.value, self._remaining
            )
        self._remaining = 0
        self._total = 0
        self._set_state(TimerState.IDLE)

    def reset(self) -> None:
        self.stop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._state != TimerState.RUNNING:
            return
        self._remaining = max(0, self._remaining - 1)
        if self._remaining <= 0:
            self._finish()
            return
        self.tick.emit(self.snapshot())

    def _finish(self) -> None:
        self._qt_timer.stop()
        finished_mode = self._mode
        duration = self._total

        self._remaining = 0
        self._total = 0
        self._state = TimerState.IDLE
        logger.info("Completed %s countdown (%ss)", finished_mode.value, duration)

        self.completed.emit(finished_mode, duration)
        self.tick.emit(self.snapshot())

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.tick.emit(self.snapshot())
