"""Shared test helpers for Pomogate."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from pomogate.timer.break_timer import BreakCompleted, BreakRequest
from pomogate.timer.cycle import (
    CycleController, GoalChanged, GoalSubmitted, StartupFocus,
)


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually driven clock; ``advance`` moves monotonic and wall time together."""

    def __init__(self, start: datetime = datetime(2026, 10, 19, 9, 0, 0)):
        self._mono = 1000.0
        self._now = start

    def monotonic(self) -> float:
        return self._mono

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def advance(self, seconds: float) -> None:
        self._mono += seconds
        self._now += timedelta(seconds=seconds)

    def set_now(self, when: datetime) -> None:
        """Jump the wall clock only (e.g. across midnight)."""
        self._now = when


class ScriptedBreaks:
    """Break spawner returning queued outcomes.

    Queue entries are outcomes, exceptions (raised) or callables taking
    the request.  With an empty queue every break completes on time.
    """

    def __init__(self, *outcomes):
        self.queue = list(outcomes)
        self.requests: list[BreakRequest] = []

    def __call__(self, request: BreakRequest):
        self.requests.append(request)
        if not self.queue:
            return BreakCompleted(elapsed=request.duration)
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(request)
        return item

    @property
    def kinds(self) -> list[str]:
        return ["long" if r.is_long else "short" for r in self.requests]


class RecordingNotifier:
    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple[str, str]] = []
        self.error = error

    def __call__(self, summary: str, body: str) -> None:
        self.calls.append((summary, body))
        if self.error is not None:
            raise self.error

    @property
    def bodies(self) -> list[str]:
        return [body for _summary, body in self.calls]


def start_running(controller: CycleController, goal: str = "write tests") -> None:
    """Walk the controller from Startup to Running with *goal*."""
    controller.dispatch(StartupFocus())
    controller.dispatch(GoalChanged(goal))
    controller.dispatch(GoalSubmitted())
