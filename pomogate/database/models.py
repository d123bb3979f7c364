"""SQLAlchemy ORM models for the stats file."""

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class WorkGoal(Base):
    """One entry of the append-only work-goal log (row id keeps the order)."""

    __tablename__ = "work_goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    logged_at = Column(DateTime, nullable=False)
    text = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<WorkGoal id={self.id} at={self.logged_at} text={self.text!r}>"


class PeriodCount(Base):
    """Session and pomodoro counters for one calendar bucket.

    ``period`` is day | week | month | year | all_time and ``key`` the
    bucket inside it (``2026-10-19``, ``2026-W43``, ``2026-10``, ``2026``,
    or empty for all_time).
    """

    __tablename__ = "period_counts"
    __table_args__ = (UniqueConstraint("period", "key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    period = Column(String(8), nullable=False)
    key = Column(String(16), nullable=False, default="")
    sessions = Column(Integer, nullable=False, default=0)
    pomodori = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<PeriodCount {self.period}:{self.key} "
            f"sessions={self.sessions} pomodori={self.pomodori}>"
        )


class DayLedgerRow(Base):
    """Single-row table: off-duration accounting of the last saved day."""

    __tablename__ = "day_ledger"

    id = Column(Integer, primary_key=True)
    day = Column(Date, nullable=True)
    off_duration = Column(Float, nullable=False, default=0.0)
    duration_today = Column(Float, nullable=False, default=0.0)
    in_overtime = Column(Boolean, nullable=False, default=False)
