"""Error taxonomy for Pomodian."""


class PomodianError(Exception):
    """Base exception for the timer core."""


class InvalidTransition(PomodianError):
    """Raised when a command is issued in a state that disallows it."""


class InvalidConfiguration(PomodianError):
    """Raised when a settings update carries an out-of-range value."""
