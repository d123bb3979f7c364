"""In-memory stats record and its calendar buckets.

Every count lives in four buckets derived from one calendar date:

===========  =======================  ==================
period       in-memory key            stored key
===========  =======================  ==================
day          ``date``                 ``2026-10-19``
week         ``(iso_year, iso_week)`` ``2026-W43``
month        ``(year, month)``        ``2026-10``
year         ``year``                 ``2026``
===========  =======================  ==================

plus a single all-time counter, and the off-duration ledger of the day the
record was last saved on (``DayLedger``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable


@dataclass
class Count:
    sessions: int = 0
    pomodori: int = 0


@dataclass
class DayLedger:
    """Off-duration accounting for one day; ``day`` is None until first saved."""

    day: date | None = None
    off_duration: float = 0.0
    duration_today: float = 0.0
    in_overtime: bool = False


@dataclass
class Stats:
    work_goals: list[tuple[datetime, str]] = field(default_factory=list)
    day: dict[date, Count] = field(default_factory=dict)
    week: dict[tuple[int, int], Count] = field(default_factory=dict)
    month: dict[tuple[int, int], Count] = field(default_factory=dict)
    year: dict[int, Count] = field(default_factory=dict)
    all_time: Count = field(default_factory=Count)
    ledger: DayLedger = field(default_factory=DayLedger)

    def buckets_for(self, day: date) -> list[Count]:
        """The day/week/month/year counters for *day*, created on demand."""
        counts = []
        for period in PERIODS:
            buckets: dict[Any, Count] = getattr(self, period.name)
            counts.append(buckets.setdefault(period.key_of(day), Count()))
        return counts

    def count_for(self, period_name: str, day: date) -> Count:
        """Read-only lookup; missing buckets read as zero."""
        period = PERIODS_BY_NAME[period_name]
        found = getattr(self, period_name).get(period.key_of(day))
        return Count(found.sessions, found.pomodori) if found else Count()


# ── bucket keys ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Period:
    name: str
    key_of: Callable[[date], Any]
    dump: Callable[[Any], str]
    load: Callable[[str], Any]


def _load_week(text: str) -> tuple[int, int]:
    year, week = text.split("-W")
    return int(year), int(week)


def _load_month(text: str) -> tuple[int, int]:
    year, month = text.split("-")
    return int(year), int(month)


PERIODS: tuple[Period, ...] = (
    Period(
        "day",
        key_of=lambda d: d,
        dump=lambda k: k.isoformat(),
        load=date.fromisoformat,
    ),
    Period(
        "week",
        key_of=lambda d: tuple(d.isocalendar())[:2],
        dump=lambda k: f"{k[0]:04d}-W{k[1]:02d}",
        load=_load_week,
    ),
    Period(
        "month",
        key_of=lambda d: (d.year, d.month),
        dump=lambda k: f"{k[0]:04d}-{k[1]:02d}",
        load=_load_month,
    ),
    Period(
        "year",
        key_of=lambda d: d.year,
        dump=lambda k: f"{k:04d}",
        load=int,
    ),
)

PERIODS_BY_NAME: dict[str, Period] = {p.name: p for p in PERIODS}

ALL_TIME = "all_time"
