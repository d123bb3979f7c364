"""Break countdown and the outcomes a break can end with.

Unlike :class:`~pomogate.timer.work_timer.WorkTimer` the remaining time
is signed: once the nominal break is used up the timer keeps counting
into negative values so the user sees how long they have overstayed.

Exit rules
----------
- While time is left, the only way out is ``request_overtime()``, and
  only when an overtime allowance was offered for this break.
- Once time runs out, ``submit(goal)`` ends the break.  With
  ``require_goal`` the goal of the next work session must be non-blank;
  without it any submit ends the break (plain fixed-duration mode).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .clock import Clock, SYSTEM_CLOCK


# ── outcomes ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OvertimeGranted:
    """The user asked for more work time instead of the break."""

    duration: float


@dataclass(frozen=True)
class BreakCompleted:
    """The break ran its course; ``elapsed`` includes any overstay."""

    elapsed: float
    goal: str = ""


BreakOutcome = Union[OvertimeGranted, BreakCompleted]


@dataclass(frozen=True)
class BreakRequest:
    """Everything the break window needs to run one break."""

    is_long: bool
    duration: float
    overtime: float | None = None


# ── timer ─────────────────────────────────────────────────────────────────


class BreakTimer:
    def __init__(
        self,
        duration: float,
        *,
        is_long: bool = False,
        overtime: float | None = None,
        require_goal: bool = True,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        self._clock = clock
        self._duration = float(duration)
        self._remaining = float(duration)
        self._is_long = is_long
        self._overtime = overtime
        self._require_goal = require_goal
        self._last_tick = clock.monotonic()

    @classmethod
    def from_request(
        cls,
        request: BreakRequest,
        *,
        require_goal: bool = True,
        clock: Clock = SYSTEM_CLOCK,
    ) -> "BreakTimer":
        return cls(
            request.duration,
            is_long=request.is_long,
            overtime=request.overtime,
            require_goal=require_goal,
            clock=clock,
        )

    # ── queries ───────────────────────────────────────────────────────

    @property
    def remaining(self) -> float:
        """Signed seconds left; negative once the break is overstayed."""
        return self._remaining

    @property
    def elapsed(self) -> float:
        return self._duration - self._remaining

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_long(self) -> bool:
        return self._is_long

    @property
    def is_over(self) -> bool:
        return self._remaining <= 0.0

    @property
    def overtime_available(self) -> bool:
        return self._overtime is not None and not self.is_over

    @property
    def overtime(self) -> float | None:
        """Overtime allowance offered for this break, if any."""
        return self._overtime

    @property
    def require_goal(self) -> bool:
        return self._require_goal

    # ── events ────────────────────────────────────────────────────────

    def tick(self) -> None:
        now = self._clock.monotonic()
        self._remaining -= now - self._last_tick
        self._last_tick = now

    def request_overtime(self) -> OvertimeGranted | None:
        self.tick()
        if not self.overtime_available:
            return None
        return OvertimeGranted(self._overtime)

    def can_submit(self, goal: str) -> bool:
        if not self.is_over:
            return False
        return bool(goal.strip()) or not self._require_goal

    def submit(self, goal: str) -> BreakCompleted | None:
        self.tick()
        if not self.can_submit(goal):
            return None
        return BreakCompleted(elapsed=self.elapsed, goal=goal.strip())
