"""Allow running Pomodian as a module: python -m pomodian."""

import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from .database import SessionStore, init_db
from .settings import Settings, load_settings
from .stats import StatsPeriod, format_focus_time
from .timer import Mode, SessionOrchestrator, TimerSnapshot, TimerState


def _format_clock(seconds: int) -> str:
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def _completion_text(settings: Settings, finished: Mode, next_mode: Mode) -> str:
    """Bell and/or banner announcing a finished interval."""
    bell = "\a" if settings.play_sound else ""
    if not settings.notifications_enabled:
        return bell
    return (
        f"{bell}Pomodian - {finished.label} Complete: your {finished.label.lower()} "
        f"session is finished. Next: {next_mode.label}"
    )


def _print_stats(store: SessionStore) -> None:
    for label, period in (("Today", StatsPeriod.DAILY), ("This week", StatsPeriod.WEEKLY)):
        stats = store.stats(period)
        print(
            f"{label}: {stats.completed_count} sessions, "
            f"{format_focus_time(stats.total_focus_seconds)} focused"
        )


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    settings = load_settings()
    store = SessionStore()

    app = QCoreApplication(sys.argv)
    app.setApplicationName("Pomodian")
    app.setOrganizationName("Pomodian")

    orchestrator = SessionOrchestrator(settings, parent=app, session_log=store)

    def on_tick(snapshot: TimerSnapshot) -> None:
        if snapshot.state == TimerState.RUNNING:
            print(f"\r{snapshot.mode.label:<12} {_format_clock(snapshot.remaining_seconds)}",
                  end="", flush=True)

    def on_awaiting_ack(finished: Mode, next_mode: Mode) -> None:
        print(_completion_text(orchestrator.settings, finished, next_mode))

    def on_acknowledged(mode: Mode) -> None:
        if orchestrator.engine.state == TimerState.IDLE:
            print(f"Ready for {mode.label}. Bye!")
            _print_stats(store)
            app.quit()

    orchestrator.tick.connect(on_tick)
    orchestrator.session_awaiting_ack.connect(on_awaiting_ack)
    orchestrator.acknowledged.connect(on_acknowledged)
    orchestrator.rejected.connect(lambda error: print(f"\n{error}"))

    # Ctrl-C: Qt's loop never returns to Python on its own, so wake it
    # up periodically to let the signal handler run.
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    wakeup = QTimer(app)
    wakeup.timeout.connect(lambda: None)
    wakeup.start(200)

    _print_stats(store)
    orchestrator.start()
    code = app.exec()
    orchestrator.reset()
    print()
    sys.exit(code)


if __name__ == "__main__":
    main()
