"""Stats file encoding: one SQLite database per stats file.

The file is always written whole: a fresh database is built next to the
target and then moved over it with ``os.replace``, so a crash mid-write
leaves the previous file intact.  ``PRAGMA user_version`` carries the
format version; anything else is refused rather than misread.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session as OrmSession, sessionmaker

from .models import Base, DayLedgerRow, PeriodCount, WorkGoal
from .records import ALL_TIME, PERIODS, Count, DayLedger, Stats

log = logging.getLogger(__name__)

STATS_FORMAT_VERSION = 2


class StatsFormatError(ValueError):
    """The file is a database but not a stats file this version can read."""


# ── engine & session helpers ──────────────────────────────────────────────


def _make_engine(path: Path) -> Engine:
    return create_engine(f"sqlite:///{path}", echo=False)


def _make_readonly_engine(path: Path) -> Engine:
    """Engine that never creates or modifies the file at *path*."""
    uri = f"{path.absolute().as_uri()}?mode=ro"
    return create_engine(
        "sqlite://",
        creator=lambda: sqlite3.connect(uri, uri=True),
        echo=False,
    )


@contextmanager
def get_session(engine: Engine):
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── decode ────────────────────────────────────────────────────────────────


def read_stats(path: Path) -> Stats:
    """Decode the stats file at *path*.

    Raises ``FileNotFoundError`` when nothing exists at *path*,
    ``IsADirectoryError`` when it is a directory,
    ``StatsFormatError`` for a version mismatch and ``SQLAlchemyError``
    when the file is not a readable database.
    """
    if not path.exists() and not path.is_symlink():
        raise FileNotFoundError(str(path))
    if path.is_dir():
        raise IsADirectoryError(str(path))

    engine = _make_readonly_engine(path)
    try:
        with engine.connect() as conn:
            version = conn.execute(text("PRAGMA user_version")).scalar()
        if version != STATS_FORMAT_VERSION:
            raise StatsFormatError(
                f"unsupported stats format version {version} "
                f"(expected {STATS_FORMAT_VERSION})"
            )

        stats = Stats()
        with get_session(engine) as db:
            for goal in db.query(WorkGoal).order_by(WorkGoal.id):
                stats.work_goals.append((goal.logged_at, goal.text))

            periods = {p.name: p for p in PERIODS}
            for row in db.query(PeriodCount).order_by(PeriodCount.id):
                count = Count(sessions=row.sessions, pomodori=row.pomodori)
                if row.period == ALL_TIME:
                    stats.all_time = count
                    continue
                period = periods.get(row.period)
                if period is None:
                    raise StatsFormatError(f"unknown period {row.period!r}")
                getattr(stats, period.name)[period.load(row.key)] = count

            row = db.query(DayLedgerRow).first()
            if row is not None:
                stats.ledger = DayLedger(
                    day=row.day,
                    off_duration=row.off_duration,
                    duration_today=row.duration_today,
                    in_overtime=row.in_overtime,
                )
        return stats
    finally:
        engine.dispose()


# ── encode ────────────────────────────────────────────────────────────────


def _populate(db: OrmSession, stats: Stats) -> None:
    db.add_all(
        WorkGoal(logged_at=logged_at, text=goal)
        for logged_at, goal in stats.work_goals
    )
    for period in PERIODS:
        for key, count in getattr(stats, period.name).items():
            db.add(PeriodCount(
                period=period.name,
                key=period.dump(key),
                sessions=count.sessions,
                pomodori=count.pomodori,
            ))
    db.add(PeriodCount(
        period=ALL_TIME,
        key="",
        sessions=stats.all_time.sessions,
        pomodori=stats.all_time.pomodori,
    ))
    db.add(DayLedgerRow(
        day=stats.ledger.day,
        off_duration=stats.ledger.off_duration,
        duration_today=stats.ledger.duration_today,
        in_overtime=stats.ledger.in_overtime,
    ))


def write_stats(path: Path, stats: Stats) -> None:
    """Encode *stats* and atomically replace the file at *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
    )
    os.close(fd)
    tmp_path = Path(tmp_name)

    engine = _make_engine(tmp_path)
    try:
        with engine.connect() as conn:
            conn.execute(text(f"PRAGMA user_version = {STATS_FORMAT_VERSION}"))
            conn.commit()
        Base.metadata.create_all(engine)
        with get_session(engine) as db:
            _populate(db, stats)
        engine.dispose()
        os.replace(tmp_path, path)
    except Exception:
        engine.dispose()
        tmp_path.unlink(missing_ok=True)
        raise
    log.debug("wrote stats to %s", path)
