"""Full-screen break window.

Runs one :class:`~pomogate.timer.break_timer.BreakTimer` modally and
reports how the break ended.  Escape and window-close are ignored: the
only ways out are the overtime button (while it is offered) and
submitting the next work goal once the break time is up.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QCloseEvent, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QDialog, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget,
)

from ..errors import BreakError
from ..settings import Settings
from ..timer.break_timer import BreakOutcome, BreakRequest, BreakTimer
from ..timer.clock import Clock, SYSTEM_CLOCK, format_clock
from .styles import build_stylesheet

log = logging.getLogger(__name__)

OVERTIME_SHORTCUT = "Ctrl+O"


class BreakDialog(QDialog):
    def __init__(
        self,
        request: BreakRequest,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sounds=None,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        super().__init__(parent)
        self._timer = BreakTimer.from_request(
            request, require_goal=settings.require_work_goal, clock=clock,
        )
        self._sounds = sounds
        self._outcome: BreakOutcome | None = None
        self._announced_over = False

        self.setWindowTitle("Break time")
        self.setModal(True)
        self.setWindowFlags(
            Qt.WindowType.Window
            | Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
        )
        self.setStyleSheet(build_stylesheet(settings))
        self._build_ui()

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(1000)
        self._qt_timer.timeout.connect(self._on_tick)
        self._qt_timer.start()

        if self._sounds is not None:
            self._sounds.play("break_start")
        self._refresh()

    @property
    def outcome(self) -> BreakOutcome | None:
        return self._outcome

    @property
    def timer(self) -> BreakTimer:
        return self._timer

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(20)

        self._title = QLabel(self)
        self._title.setObjectName("titleLabel")
        self._title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._title)

        self._time_label = QLabel(self)
        self._time_label.setObjectName("timerLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._goal_input = QLineEdit(self)
        self._goal_input.setPlaceholderText("Enter the goal of the next work session")
        self._goal_input.setMinimumWidth(900)
        self._goal_input.returnPressed.connect(self._on_submit)
        self._goal_input.textChanged.connect(lambda _text: self._refresh())
        layout.addWidget(self._goal_input, alignment=Qt.AlignmentFlag.AlignCenter)

        self._overtime_btn = QPushButton(self)
        self._overtime_btn.clicked.connect(self._on_overtime)
        layout.addWidget(self._overtime_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        QShortcut(QKeySequence(OVERTIME_SHORTCUT), self, activated=self._on_overtime)

        self._hint = QLabel(self)
        self._hint.setObjectName("hintLabel")
        self._hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._hint)

        self._goal_input.setFocus()

    # ── events ────────────────────────────────────────────────────────

    def _on_tick(self) -> None:
        self._timer.tick()
        if self._timer.is_over and not self._announced_over:
            self._announced_over = True
            if self._sounds is not None:
                self._sounds.play("break_over")
        self._refresh()

    def _on_overtime(self) -> None:
        outcome = self._timer.request_overtime()
        if outcome is not None:
            self._finish(outcome)

    def _on_submit(self) -> None:
        outcome = self._timer.submit(self._goal_input.text())
        if outcome is not None:
            self._finish(outcome)

    def _finish(self, outcome: BreakOutcome) -> None:
        self._outcome = outcome
        self._qt_timer.stop()
        log.debug("break window finished with %s", outcome)
        self.accept()

    def reject(self) -> None:
        # Escape must not end a break.
        pass

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._outcome is None:
            event.ignore()
            return
        super().closeEvent(event)

    # ── display ───────────────────────────────────────────────────────

    def _refresh(self) -> None:
        timer = self._timer
        if timer.is_over:
            title = "Time to work! (submit your work goal)"
        elif timer.is_long:
            title = "Time for a long break"
        else:
            title = "Time for a break!"
        self._title.setText(title)

        self._time_label.setText(format_clock(timer.remaining))
        self._time_label.setProperty("overtime", timer.is_over)
        self._time_label.style().polish(self._time_label)

        self._overtime_btn.setVisible(timer.overtime_available)
        if timer.overtime_available:
            self._overtime_btn.setText(
                f"Keep working (+{format_clock(timer.overtime)})"
            )

        if timer.is_over:
            self._hint.setText("Press Enter to start working")
        elif timer.overtime_available:
            self._hint.setText(f"{OVERTIME_SHORTCUT} for more work time")
        else:
            self._hint.setText("")


def spawn_break(
    request: BreakRequest,
    settings: Settings,
    sounds=None,
    clock: Clock = SYSTEM_CLOCK,
) -> BreakOutcome:
    """Show the break window and block until the break ends."""
    dialog = BreakDialog(request, settings, sounds=sounds, clock=clock)
    dialog.showFullScreen()
    dialog.exec()
    outcome = dialog.outcome
    dialog.deleteLater()
    if outcome is None:
        raise BreakError("Break window closed without a result")
    return outcome
