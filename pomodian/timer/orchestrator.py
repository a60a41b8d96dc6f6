"""Mode cycling, completion acknowledgment and session recording.

The orchestrator owns the *current* mode (the one the next ``start``
uses) and wraps a :class:`TimerEngine`.  When a countdown reaches zero it
records a :class:`SessionRecord`, works out the next mode and opens the
acknowledgment window.  The window closes in exactly one of four ways:

- a manual ``acknowledge`` (or a ``start_or_toggle``/``cycle_mode`` call,
  which acknowledge while the window is open),
- the auto-start grace timer, when auto-start applies,
- the expiry timer,
- ``reset``, which closes it without advancing the mode.

Every path goes through ``_close_window`` so both deferred timers are
stopped whichever one wins.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..errors import InvalidConfiguration, InvalidTransition
from ..settings import Settings
from .engine import Mode, TimerEngine, TimerSnapshot, TimerState
from .records import SessionLog, SessionRecord, SessionSink


logger = logging.getLogger(__name__)

_CYCLE_ORDER: dict[Mode, Mode] = {
    Mode.WORK: Mode.SHORT_BREAK,
    Mode.SHORT_BREAK: Mode.LONG_BREAK,
    Mode.LONG_BREAK: Mode.WORK,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_mode_after(finished: Mode, completed_work_count: int, long_break_interval: int) -> Mode:
    """Mode that follows *finished*.

    *completed_work_count* already includes *finished* when it was a
    work session.
    """
    if finished == Mode.WORK:
        if completed_work_count % long_break_interval == 0:
            return Mode.LONG_BREAK
        return Mode.SHORT_BREAK
    return Mode.WORK


class SessionOrchestrator(QObject):
    """Single owner of the timer, the mode cycle and the ack window.

    Signals
    -------
    tick(snapshot: TimerSnapshot)
        Every engine tick and transition.  Idle snapshots carry the
        current mode so renderers can show what will run next.
    completed(mode: Mode, duration_seconds: int)
        Once per interval that reached zero.
    session_recorded(record: SessionRecord)
        After the record has been appended to the session log.
    session_awaiting_ack(finished: Mode, next_mode: Mode)
        The acknowledgment window opened.
    acknowledged(mode: Mode)
        The window closed; *mode* is the current mode afterwards.
    mode_changed(mode: Mode)
        The current mode changed.
    rejected(error: PomodianError)
        A command or settings update was refused.
    """

    tick = pyqtSignal(object)
    completed = pyqtSignal(object, int)
    session_recorded = pyqtSignal(object)
    session_awaiting_ack = pyqtSignal(object, object)
    acknowledged = pyqtSignal(object)
    mode_changed = pyqtSignal(object)
    rejected = pyqtSignal(object)

    def __init__(
        self,
        settings: Settings | None = None,
        parent: QObject | None = None,
        *,
        session_log: SessionSink | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        super().__init__(parent)

        settings = replace(settings) if settings is not None else Settings()
        settings.validate()
        self._settings: Settings = settings
        self._session_log: SessionSink = (
            session_log if session_log is not None else SessionLog()
        )
        self._clock = clock

        # ── cycle state ───────────────────────────────────────────────
        self._current_mode: Mode = Mode.WORK
        self._next_mode: Mode = Mode.SHORT_BREAK
        self._completed_work_count: int = 0
        self._awaiting_ack: bool = False

        # ── engine ────────────────────────────────────────────────────
        self._engine = TimerEngine(settings, parent=self)
        self._engine.tick.connect(self._on_engine_tick)
        self._engine.completed.connect(self._on_engine_completed)

        # ── deferred callbacks ────────────────────────────────────────
        self._auto_start_timer = QTimer(self)
        self._auto_start_timer.setSingleShot(True)
        self._auto_start_timer.timeout.connect(self._on_auto_start)

        self._ack_timer = QTimer(self)
        self._ack_timer.setSingleShot(True)
        self._ack_timer.timeout.connect(self._on_ack_expired)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def settings(self) -> Settings:
        """A copy; pass an edited one to ``update_settings``."""
        return replace(self._settings)

    @property
    def session_log(self) -> SessionSink:
        return self._session_log

    @property
    def current_mode(self) -> Mode:
        return self._current_mode

    @property
    def next_mode(self) -> Mode:
        return self._next_mode

    @property
    def completed_work_count(self) -> int:
        return self._completed_work_count

    @property
    def awaiting_ack(self) -> bool:
        return self._awaiting_ack

    @property
    def can_cycle_mode(self) -> bool:
        """True when ``cycle_mode`` would switch modes right now."""
        return self._engine.state == TimerState.IDLE and not self._awaiting_ack

    def snapshot(self) -> TimerSnapshot:
        return self._decorate(self._engine.snapshot())

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> bool:
        """Start the current mode.  Acknowledges an open window instead."""
        if self._awaiting_ack:
            return self.acknowledge()
        if self._engine.state != TimerState.IDLE:
            self._reject(InvalidTransition(
                f"Timer is already {self._engine.state.value}"
            ))
            return False
        return self._engine.start(self._current_mode)

    def pause_or_resume(self) -> bool:
        """Pause a running timer or resume a paused one."""
        if self._awaiting_ack:
            return self.acknowledge()
        state = self._engine.state
        if state == TimerState.RUNNING:
            return self._engine.pause()
        if state == TimerState.PAUSED:
            return self._engine.resume()
        self._reject(InvalidTransition("Nothing to pause or resume"))
        return False

    def start_or_toggle(self) -> bool:
        """The single play/pause/acknowledge control."""
        if self._awaiting_ack:
            return self.acknowledge()
        if self._engine.state == TimerState.IDLE:
            return self._engine.start(self._current_mode)
        return self.pause_or_resume()

    def reset(self) -> bool:
        """Abandon the current interval.  The current mode is kept."""
        self._close_window()
        self._engine.reset()
        return True

    def cycle_mode(self) -> bool:
        """Work → Short Break → Long Break → Work, only while idle."""
        if self._awaiting_ack:
            return self.acknowledge()
        if self._engine.state != TimerState.IDLE:
            self._reject(InvalidTransition("Reset the timer to switch modes"))
            return False
        self._set_current_mode(_CYCLE_ORDER[self._current_mode])
        self.tick.emit(self.snapshot())
        return True

    def acknowledge(self) -> bool:
        """Close the acknowledgment window.

        Moves to the next mode unless an auto-start already did.
        """
        if not self._awaiting_ack:
            logger.debug("acknowledge() ignored: no session awaiting acknowledgment")
            return False
        self._close_window()
        if not self._engine.is_running:
            self._set_current_mode(self._next_mode)
        logger.info("Acknowledged; current mode is %s", self._current_mode.value)
        self.acknowledged.emit(self._current_mode)
        self.tick.emit(self.snapshot())
        return True

    def update_settings(self, settings: Settings) -> bool:
        """Swap settings; invalid ones are rejected and the old ones kept.

        A countdown in progress is not affected.  Deferred timers already
        scheduled keep their original delay.
        """
        try:
            self._engine.update_settings(settings)
        except InvalidConfiguration as exc:
            logger.warning("Rejected settings update: %s", exc)
            self._reject(exc)
            return False
        self._settings = self._engine.settings
        if self._engine.state == TimerState.IDLE:
            self.tick.emit(self.snapshot())
        return True

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — engine events
    # ══════════════════════════════════════════════════════════════════

    def _on_engine_tick(self, snapshot: TimerSnapshot) -> None:
        self.tick.emit(self._decorate(snapshot))

    def _on_engine_completed(self, mode: Mode, duration_seconds: int) -> None:
        # Restart both deferred timers for the new window.
        self._close_window()

        record = SessionRecord(
            timestamp=self._clock(),
            mode=mode,
            duration_seconds=duration_seconds,
        )
        self._session_log.append(record)
        self.session_recorded.emit(record)
        self.completed.emit(mode, duration_seconds)

        if mode == Mode.WORK:
            self._completed_work_count += 1
        self._next_mode = next_mode_after(
            mode, self._completed_work_count, self._settings.long_break_interval
        )
        self._awaiting_ack = True
        logger.info(
            "%s session complete (%s work sessions); next: %s",
            mode.label, self._completed_work_count, self._next_mode.value,
        )
        self.session_awaiting_ack.emit(mode, self._next_mode)

        auto_start = (
            self._settings.auto_start_work if mode.is_break
            else self._settings.auto_start_breaks
        )
        if auto_start:
            self._auto_start_timer.start(_to_ms(self._settings.grace_delay_seconds))
        self._ack_timer.start(_to_ms(self._settings.ack_timeout_seconds))

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — deferred callbacks
    # ══════════════════════════════════════════════════════════════════

    def _on_auto_start(self) -> None:
        if not self._awaiting_ack:
            return
        self._close_window()
        self._set_current_mode(self._next_mode)
        logger.info("Auto-starting %s", self._current_mode.value)
        self._engine.start(self._current_mode)
        self.acknowledged.emit(self._current_mode)

    def _on_ack_expired(self) -> None:
        if not self._awaiting_ack:
            return
        logger.debug("Acknowledgment window expired")
        self.acknowledge()

    def _close_window(self) -> None:
        self._awaiting_ack = False
        self._auto_start_timer.stop()
        self._ack_timer.stop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — helpers
    # ══════════════════════════════════════════════════════════════════

    def _set_current_mode(self, mode: Mode) -> None:
        if mode == self._current_mode:
            return
        self._current_mode = mode
        self.mode_changed.emit(mode)

    def _decorate(self, snapshot: TimerSnapshot) -> TimerSnapshot:
        if snapshot.state == TimerState.IDLE:
            return replace(snapshot, mode=self._current_mode)
        return snapshot

    def _reject(self, error: InvalidTransition | InvalidConfiguration) -> None:
        logger.debug("Rejected: %s", error)
        self.rejected.emit(error)


def _to_ms(seconds: float) -> int:
    return max(0, int(round(seconds * 1000)))
