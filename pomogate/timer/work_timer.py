"""Work-session countdown.

Elapsed time is measured from the monotonic clock on every tick rather
than assumed to be one second, so a slow redraw or a late timer event
never stretches the session.  Paused is encoded as ``last_tick is None``.
"""

from __future__ import annotations

from .clock import Clock, SYSTEM_CLOCK


class WorkTimer:
    def __init__(self, duration: float, clock: Clock = SYSTEM_CLOCK) -> None:
        self._clock = clock
        self._remaining: float = max(0.0, float(duration))
        self._last_tick: float | None = clock.monotonic()

    def __repr__(self) -> str:
        state = "paused" if self.is_paused else "running"
        return f"<WorkTimer remaining={self._remaining:.1f}s {state}>"

    @property
    def remaining(self) -> float:
        """Seconds of work left, never below zero."""
        return self._remaining

    @property
    def is_paused(self) -> bool:
        return self._last_tick is None

    @property
    def is_over(self) -> bool:
        return self._remaining <= 0.0

    def tick(self) -> float:
        """Commit the time elapsed since the last tick.

        Returns the seconds actually taken off ``remaining`` (0.0 while
        paused or once the countdown is exhausted).
        """
        if self._last_tick is None:
            return 0.0
        now = self._clock.monotonic()
        committed = self._commit(now - self._last_tick)
        self._last_tick = now
        return committed

    def toggle_pause(self) -> None:
        if self._last_tick is None:
            self._last_tick = self._clock.monotonic()
            return
        self._commit(self._clock.monotonic() - self._last_tick)
        self._last_tick = None

    def _commit(self, elapsed: float) -> float:
        elapsed = max(0.0, elapsed)
        committed = min(elapsed, self._remaining)
        self._remaining = max(0.0, self._remaining - elapsed)
        return committed
