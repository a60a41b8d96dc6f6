#!/usr/bin/env python3
"""Pomodian — entry point.

Run with:
    python main.py
    python -m pomodian
"""

from pomodian.__main__ import main


if __name__ == "__main__":
    main()
