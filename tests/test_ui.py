"""Tests for the main window and the break window."""

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtTest import QTest

from pomogate.timer.break_timer import BreakCompleted, BreakRequest, OvertimeGranted
from pomogate.timer.cycle import EarlyBreak, InitialPrompt, StartupFocus, Tick
from pomogate.ui.break_dialog import BreakDialog
from pomogate.ui.main_window import (
    PAGE_ERROR, PAGE_PROMPT, PAGE_RUNNING, MainWindow,
)
from pomogate.ui.styles import build_stylesheet

from helpers import start_running


class FakeSounds:
    def __init__(self):
        self.played = []

    def play(self, name):
        self.played.append(name)


@pytest.fixture
def window(controller, settings):
    w = MainWindow(controller, settings)
    yield w
    w.close()
    w.deleteLater()


# ═══════════════════════════════════════════════════════════════════════════
#  MAIN WINDOW
# ═══════════════════════════════════════════════════════════════════════════


class TestMainWindow:

    def test_starts_on_prompt(self, window):
        assert window._pages.currentIndex() == PAGE_PROMPT

    def test_show_requests_startup_focus(self, window, controller):
        window.show()
        QTest.qWait(50)
        assert isinstance(controller.state, InitialPrompt)

    def test_typing_updates_goal(self, window, controller):
        controller.dispatch(StartupFocus())
        QTest.keyClicks(window._goal_input, "plan")
        assert controller.state.goal == "plan"

    def test_running_page(self, window, controller, clock):
        start_running(controller, "write tests")
        clock.advance(65)
        controller.dispatch(Tick())
        assert window._pages.currentIndex() == PAGE_RUNNING
        assert window._time_label.text() == "18:55"
        assert window._goal_label.text() == "write tests"
        assert window._long_break_label.text() == "Next long break in 4 pomodori"
        assert window._pomodori_label.text() == "Pomodori today: 0"
        assert window._today_label.text() == "Duration today: 1:05"
        assert window._off_label.text() == "Off time: 0:00 (0.00%)"

    def test_off_time_share(self, window, controller, clock):
        start_running(controller)
        clock.advance(600)
        controller.dispatch(EarlyBreak())
        assert window._today_label.text() == "Duration today: 15:00"
        assert window._off_label.text() == "Off time: 10:00 (66.67%)"

    def test_keys_drive_controller(self, window, controller):
        start_running(controller)
        QTest.keyClick(window, Qt.Key.Key_P)
        assert controller.view().paused
        assert window._pause_btn.text() == "Resume"
        QTest.keyClick(window, Qt.Key.Key_L)
        assert window._last_cb.isChecked()

    def test_early_break_key(self, window, controller, breaks):
        start_running(controller)
        QTest.keyClick(window, Qt.Key.Key_E)
        assert len(breaks.requests) == 1

    def test_error_page_and_retry(self, window, controller, breaks, clock):
        breaks.queue.append(RuntimeError("display gone"))
        start_running(controller)
        QTest.keyClick(window, Qt.Key.Key_E)
        assert window._pages.currentIndex() == PAGE_ERROR

        QTest.keyClick(window, Qt.Key.Key_R)
        assert controller.error is None
        assert window._pages.currentIndex() == PAGE_RUNNING

    def test_quit_key(self, window, controller):
        start_running(controller)
        QTest.keyClick(window, Qt.Key.Key_Q)
        assert controller.view().phase == "finished"


# ═══════════════════════════════════════════════════════════════════════════
#  BREAK WINDOW
# ═══════════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestBreakDialog:

    def make(self, settings, clock, overtime=120, sounds=None):
        request = BreakRequest(is_long=False, duration=300, overtime=overtime)
        return BreakDialog(request, settings, sounds=sounds, clock=clock)

    def test_overtime_while_time_left(self, settings, clock):
        dialog = self.make(settings, clock)
        assert not dialog._overtime_btn.isHidden()
        dialog._on_overtime()
        assert dialog.outcome == OvertimeGranted(120)

    def test_no_overtime_button_without_offer(self, settings, clock):
        dialog = self.make(settings, clock, overtime=None)
        assert dialog._overtime_btn.isHidden()
        dialog._on_overtime()
        assert dialog.outcome is None

    def test_escape_does_not_end_break(self, settings, clock):
        dialog = self.make(settings, clock)
        dialog.reject()
        assert dialog.outcome is None

    def test_submit_needs_time_up(self, settings, clock):
        dialog = self.make(settings, clock)
        dialog._goal_input.setText("next")
        dialog._on_submit()
        assert dialog.outcome is None

    def test_submit_after_break(self, settings, clock):
        dialog = self.make(settings, clock)
        clock.advance(320)
        dialog._on_tick()
        assert dialog._overtime_btn.isHidden()
        assert dialog._time_label.text() == "-0:20"
        dialog._goal_input.setText("review PR")
        dialog._on_submit()
        assert dialog.outcome == BreakCompleted(elapsed=320, goal="review PR")

    def test_blank_goal_refused(self, settings, clock):
        dialog = self.make(settings, clock)
        clock.advance(300)
        dialog._on_submit()
        assert dialog.outcome is None

    def test_sounds(self, settings, clock):
        sounds = FakeSounds()
        dialog = self.make(settings, clock, sounds=sounds)
        assert sounds.played == ["break_start"]
        clock.advance(300)
        dialog._on_tick()
        clock.advance(5)
        dialog._on_tick()
        assert sounds.played == ["break_start", "break_over"]


def test_stylesheet_uses_palette(settings):
    settings.accent = "#123456"
    settings.font_family = "Inter"
    qss = build_stylesheet(settings)
    assert "#123456" in qss
    assert '"Inter"' in qss
