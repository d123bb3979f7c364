"""Stats persistence package."""

from .db import STATS_FORMAT_VERSION, read_stats, write_stats
from .records import Count, Stats
from .store import StatsStore

__all__ = [
    "STATS_FORMAT_VERSION",
    "read_stats",
    "write_stats",
    "Count",
    "Stats",
    "StatsStore",
]
