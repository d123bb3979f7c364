"""UI package."""

from .break_dialog import BreakDialog, spawn_break
from .main_window import MainWindow
from .notifier import TrayNotifier

__all__ = ["BreakDialog", "spawn_break", "MainWindow", "TrayNotifier"]
