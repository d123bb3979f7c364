"""Shared pytest fixtures for Pomogate tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomogate.database.store import StatsStore
from pomogate.settings import Settings
from pomogate.timer.cycle import CycleController

from helpers import FakeClock, RecordingNotifier, ScriptedBreaks


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Defaults: 20m work, 5m/10m breaks, long break every 4, 8s forgiveness."""
    return Settings()


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "stats.db"


@pytest.fixture
def store(stats_path, clock):
    """Loaded store over a file that does not exist yet."""
    s = StatsStore(stats_path, clock)
    s.load()
    return s


@pytest.fixture
def breaks():
    return ScriptedBreaks()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def controller(qapp, settings, store, breaks, notifier, clock):
    ctrl = CycleController(settings, store, breaks, notifier, clock=clock)
    yield ctrl
    ctrl._qt_timer.stop()
