"""Off-duration accounting.

Off-duration is time that does not count as productive work:

- breaking early by more than the forgiveness threshold,
- overstaying a break by more than the same threshold,
- every second of work spent inside a granted overtime allowance.

``duration_today`` is all time spent in work sessions and completed breaks
since the start of the day; the UI shows off-duration as a share of it.

Once an overtime allowance is in use (``in_overtime``) the threshold no
longer applies to early or late breaks, and no further allowance is
offered until a break completes.
"""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)


class OvertimeLedger:
    def __init__(self, forgive_duration: float, overtime_duration: float) -> None:
        self._forgive = float(forgive_duration)
        self._overtime = float(overtime_duration)
        self.off_duration: float = 0.0
        self.duration_today: float = 0.0
        self.in_overtime: bool = False

    def __repr__(self) -> str:
        return (
            f"<OvertimeLedger off={self.off_duration:.1f}s "
            f"today={self.duration_today:.1f}s "
            f"in_overtime={self.in_overtime}>"
        )

    @property
    def off_percentage(self) -> float:
        """Off-duration as a percentage of ``duration_today``."""
        if self.duration_today <= 0.0:
            return 0.0
        return self.off_duration * 100.0 / self.duration_today

    def _charge(self, seconds: float) -> float:
        """Add *seconds* unless forgiven; return what was charged."""
        if seconds <= 0.0:
            return 0.0
        if not self.in_overtime and seconds <= self._forgive:
            return 0.0
        self.off_duration += seconds
        return seconds

    def overtime_offer(self, early: bool) -> float | None:
        """Allowance to offer for the break about to start, if any."""
        if early or self.in_overtime:
            return None
        return self._overtime

    def record_early_break(self, work_remaining: float) -> float:
        """Charge the unworked remainder of a session cut short."""
        charged = self._charge(work_remaining)
        if charged:
            log.info("early break charged %.0fs off-duration", charged)
        return charged

    def grant_overtime(self) -> None:
        self.in_overtime = True

    def record_work(self, elapsed: float) -> None:
        """Count committed work time; inside an overtime allowance it is also off-duration."""
        if elapsed <= 0.0:
            return
        self.duration_today += elapsed
        if self.in_overtime:
            self.off_duration += elapsed

    def record_break_completed(self, elapsed: float, nominal: float) -> float:
        """Charge any overstay past *nominal* and close the overtime stretch."""
        self.duration_today += max(0.0, elapsed)
        charged = self._charge(elapsed - nominal)
        if charged:
            log.info("overstayed break charged %.0fs off-duration", charged)
        self.in_overtime = False
        return charged

    # ── day state ─────────────────────────────────────────────────────

    def restore(
        self, off_duration: float, duration_today: float, in_overtime: bool,
    ) -> None:
        self.off_duration = float(off_duration)
        self.duration_today = float(duration_today)
        self.in_overtime = bool(in_overtime)

    def reset(self) -> None:
        """Start a new day."""
        self.restore(0.0, 0.0, False)
