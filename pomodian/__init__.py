"""Pomodian: a Work / Short Break / Long Break focus timer."""

__version__ = "0.1.0"
