"""Timer package."""

from .break_timer import (
    BreakCompleted,
    BreakOutcome,
    BreakRequest,
    BreakTimer,
    OvertimeGranted,
)
from .clock import Clock, SystemClock, SYSTEM_CLOCK, format_clock
from .cycle import CycleController, CycleView
from .overtime import OvertimeLedger
from .work_timer import WorkTimer

__all__ = [
    "BreakCompleted",
    "BreakOutcome",
    "BreakRequest",
    "BreakTimer",
    "OvertimeGranted",
    "Clock",
    "SystemClock",
    "SYSTEM_CLOCK",
    "format_clock",
    "CycleController",
    "CycleView",
    "OvertimeLedger",
    "WorkTimer",
]
