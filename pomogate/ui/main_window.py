"""Main window: a pure projection of the cycle controller's view.

Pages (one visible at a time):
    - goal prompt   (Startup / InitialPrompt)
    - running       (timer, pause button, last-session checkbox, counters)
    - error         (cause chain + Retry)

Keys while running: ``p`` pause, ``l`` last session, ``e`` early break,
``r`` retry, ``q`` quit.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QKeyEvent, QShowEvent
from PyQt6.QtWidgets import (
    QCheckBox, QHBoxLayout, QLabel, QLineEdit, QPushButton,
    QStackedWidget, QVBoxLayout, QWidget,
)

from ..settings import Settings
from ..timer.clock import format_clock
from ..timer.cycle import (
    CycleController, CycleView, EarlyBreak, GoalChanged, GoalSubmitted,
    Quit, Retry, StartupFocus, ToggleLastSession, TogglePause,
)
from .styles import build_stylesheet

PAGE_PROMPT, PAGE_RUNNING, PAGE_ERROR = range(3)

_KEY_MESSAGES = {
    Qt.Key.Key_P: TogglePause,
    Qt.Key.Key_L: ToggleLastSession,
    Qt.Key.Key_E: EarlyBreak,
    Qt.Key.Key_R: Retry,
    Qt.Key.Key_Q: Quit,
}


class MainWindow(QWidget):
    def __init__(
        self,
        controller: CycleController,
        settings: Settings,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._started = False

        self.setWindowTitle("Pomogate")
        self.setMinimumSize(900, 600)
        self.setStyleSheet(build_stylesheet(settings))
        self._build_ui()

        controller.state_changed.connect(self.render)
        controller.focus_requested.connect(self._goal_input.setFocus)
        self.render(controller.view())

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        self._pages = QStackedWidget(self)
        root.addWidget(self._pages)

        # ── goal prompt ──────────────────────────────────────────────
        prompt = QWidget(self._pages)
        prompt_layout = QVBoxLayout(prompt)
        prompt_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._goal_input = QLineEdit(prompt)
        self._goal_input.setPlaceholderText("Enter the goal of the first work session")
        self._goal_input.textEdited.connect(
            lambda text: self._controller.dispatch(GoalChanged(text))
        )
        self._goal_input.returnPressed.connect(
            lambda: self._controller.dispatch(GoalSubmitted())
        )
        prompt_layout.addWidget(self._goal_input)
        self._pages.addWidget(prompt)

        # ── running ──────────────────────────────────────────────────
        running = QWidget(self._pages)
        run_layout = QVBoxLayout(running)
        run_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        run_layout.setSpacing(20)

        timer_row = QHBoxLayout()
        timer_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label = QLabel(running)
        self._time_label.setObjectName("timerLabel")
        self._pause_btn = QPushButton(running)
        self._pause_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._pause_btn.clicked.connect(
            lambda: self._controller.dispatch(TogglePause())
        )
        timer_row.addWidget(self._time_label)
        timer_row.addWidget(self._pause_btn)
        run_layout.addLayout(timer_row)

        self._goal_label = QLabel(running)
        self._goal_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        run_layout.addWidget(self._goal_label)

        self._last_cb = QCheckBox("Last work session", running)
        self._last_cb.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._last_cb.clicked.connect(
            lambda _checked: self._controller.dispatch(ToggleLastSession())
        )
        run_layout.addWidget(self._last_cb, alignment=Qt.AlignmentFlag.AlignCenter)

        self._long_break_label = QLabel(running)
        self._pomodori_label = QLabel(running)
        self._today_label = QLabel(running)
        self._off_label = QLabel(running)
        for label in (
            self._long_break_label, self._pomodori_label,
            self._today_label, self._off_label,
        ):
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            run_layout.addWidget(label)

        hints = QLabel("p pause · l last session · e early break · q quit", running)
        hints.setObjectName("hintLabel")
        hints.setAlignment(Qt.AlignmentFlag.AlignCenter)
        run_layout.addWidget(hints)
        self._pages.addWidget(running)

        # ── error ────────────────────────────────────────────────────
        error = QWidget(self._pages)
        self._error_layout = QVBoxLayout(error)
        self._error_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._pages.addWidget(error)

    # ── rendering ─────────────────────────────────────────────────────

    def render(self, view: CycleView) -> None:
        if view.error is not None:
            self._render_error(view)
            self._pages.setCurrentIndex(PAGE_ERROR)
            return

        if view.phase in ("startup", "prompt"):
            if self._goal_input.text() != view.goal:
                self._goal_input.setText(view.goal)
            self._pages.setCurrentIndex(PAGE_PROMPT)
            return

        self._time_label.setText(format_clock(view.remaining))
        self._pause_btn.setText("Resume" if view.paused else "Pause")
        self._goal_label.setText(view.goal)
        self._last_cb.setChecked(view.last_work_session)
        self._long_break_label.setText(
            f"Next long break in {view.long_break_in} pomodori"
        )
        self._pomodori_label.setText(f"Pomodori today: {view.pomodori_today}")
        self._today_label.setText(
            f"Duration today: {format_clock(view.duration_today)}"
        )
        off = (
            f"Off time: {format_clock(view.off_duration)} "
            f"({view.off_percentage:.2f}%)"
        )
        if view.in_overtime:
            off += " (overtime)"
        self._off_label.setText(off)
        self._pages.setCurrentIndex(PAGE_RUNNING)

    def _render_error(self, view: CycleView) -> None:
        while self._error_layout.count():
            item = self._error_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        head, *rest = view.error.causes
        row = QHBoxLayout()
        title = QLabel(head)
        title.setObjectName("errorLabel")
        retry = QPushButton("Retry")
        retry.clicked.connect(lambda: self._controller.dispatch(Retry()))
        row.addWidget(title)
        row.addWidget(retry)
        holder = QWidget()
        holder.setLayout(row)
        self._error_layout.addWidget(holder)
        for cause in rest:
            label = QLabel(cause)
            label.setObjectName("causeLabel")
            label.setWordWrap(True)
            self._error_layout.addWidget(label)

    # ── events ────────────────────────────────────────────────────────

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        if not self._started:
            self._started = True
            QTimer.singleShot(0, lambda: self._controller.dispatch(StartupFocus()))

    def keyPressEvent(self, event: QKeyEvent) -> None:
        message = _KEY_MESSAGES.get(event.key())
        if (
            message is None
            or event.modifiers() != Qt.KeyboardModifier.NoModifier
            or self._pages.currentIndex() == PAGE_PROMPT
        ):
            super().keyPressEvent(event)
            return
        if self._pages.currentIndex() == PAGE_ERROR and message not in (Retry, Quit):
            return
        if self._pages.currentIndex() == PAGE_RUNNING and message is Retry:
            return
        self._controller.dispatch(message())
