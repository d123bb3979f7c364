"""Clock sources.

Timers only ever look at ``monotonic()``; stats bucketing looks at
``now()`` / ``today()``.  Both come from one object so tests can swap in
a fake and drive time explicitly.
"""

from __future__ import annotations

import time
from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    def monotonic(self) -> float: ...

    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """The real clock: ``time.monotonic`` plus local wall-clock time."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


SYSTEM_CLOCK = SystemClock()


def format_clock(seconds: float) -> str:
    """``m:ss`` for a signed number of seconds, e.g. ``-1:05``."""
    whole = int(seconds)
    sign = "-" if whole < 0 else ""
    minutes, secs = divmod(abs(whole), 60)
    return f"{sign}{minutes}:{secs:02d}"
