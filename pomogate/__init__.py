"""Pomogate: a pomodoro timer that gates breaks behind the next work goal."""

__version__ = "0.1.0"
