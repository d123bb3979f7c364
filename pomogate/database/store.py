"""Date-bucketed statistics store.

Lifecycle::

    store = StatsStore(path)
    store.load()                       # empty record if the file is absent
    store.increment_pomodori()
    store.append_work_goal(now, "write the parser")
    store.record_day_ledger(off, today, in_overtime)
    store.save()                       # atomic full-file replace
    store.reload_if_date_changed()     # after midnight: reload from disk

Saving always comes before the reload check so that nothing counted in
memory is discarded by the reload.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StatsError
from ..timer.clock import Clock, SYSTEM_CLOCK
from .db import read_stats, write_stats
from .records import DayLedger, Stats

log = logging.getLogger(__name__)


class StatsStore:
    def __init__(self, path: Path, clock: Clock = SYSTEM_CLOCK) -> None:
        self._path = Path(path)
        self._clock = clock
        self._current_date: date = clock.today()
        self._stats = Stats()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current_date(self) -> date:
        """The date captured by the last load; buckets default to it."""
        return self._current_date

    @property
    def stats(self) -> Stats:
        return self._stats

    # ── persistence ───────────────────────────────────────────────────

    def load(self) -> Stats:
        current_date = self._clock.today()
        try:
            stats = read_stats(self._path)
        except FileNotFoundError:
            log.info("no stats at %s, starting fresh", self._path)
            stats = Stats()
        except (OSError, ValueError, SQLAlchemyError) as exc:
            raise StatsError(f"Cannot decode {self._path}") from exc
        self._stats = stats
        self._current_date = current_date
        return stats

    def save(self) -> None:
        try:
            write_stats(self._path, self._stats)
        except (OSError, SQLAlchemyError) as exc:
            raise StatsError(f"Cannot write {self._path}") from exc

    def reload_if_date_changed(self) -> bool:
        """Reload from disk when the date moved on; True if it did."""
        today = self._clock.today()
        if today == self._current_date:
            return False
        log.info("date changed %s -> %s, reloading stats",
                 self._current_date, today)
        self.load()
        return True

    # ── mutations ─────────────────────────────────────────────────────

    def increment_pomodori(self, day: date | None = None) -> None:
        for count in self._stats.buckets_for(day or self._current_date):
            count.pomodori += 1
        self._stats.all_time.pomodori += 1

    def increment_app_session(self, day: date | None = None) -> None:
        for count in self._stats.buckets_for(day or self._current_date):
            count.sessions += 1
        self._stats.all_time.sessions += 1

    def append_work_goal(self, timestamp: datetime, text: str) -> None:
        self._stats.work_goals.append((timestamp, text))

    def record_day_ledger(
        self,
        off_duration: float,
        duration_today: float,
        in_overtime: bool,
    ) -> None:
        """Keep the off-duration ledger for the current date with the record."""
        self._stats.ledger = DayLedger(
            day=self._current_date,
            off_duration=off_duration,
            duration_today=duration_today,
            in_overtime=in_overtime,
        )

    # ── queries ───────────────────────────────────────────────────────

    def daily_pomodori_count(self) -> int:
        return self._stats.count_for("day", self._current_date).pomodori

    def day_ledger(self) -> DayLedger:
        """The saved ledger if it belongs to the current date, else a fresh one."""
        ledger = self._stats.ledger
        if ledger.day != self._current_date:
            return DayLedger(day=self._current_date)
        return ledger
