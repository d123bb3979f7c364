"""Pomodoro cycle state machine for Pomogate.

States
------
Startup         Window not shown yet.
InitialPrompt   Collecting the goal of the first work session.
Running         Work timer counting down between breaks.
Finished        Last work session over, or the user quit.

Transitions
-----------
Startup       --StartupFocus-->       InitialPrompt("")
InitialPrompt --GoalChanged(text)-->  InitialPrompt(text)
InitialPrompt --GoalSubmitted-->      Running            (goal non-blank)
Running       --Tick-->               Running            (maybe heads-up)
Running       --Tick at zero-->       Running            (break, pomodoro counted)
Running       --Tick at zero-->       Finished           (last work session)
Running       --EarlyBreak-->         Running            (break, early accounting)
Running       --TogglePause / ToggleLastSession--> Running
any           --Quit-->               Finished

A failed side effect (saving stats, running the break window) raises the
error overlay.  While it is up everything except ``Retry`` and ``Quit``
is dropped; ``Retry`` redispatches the message that failed.  A message
with no transition from the current state is a routing bug and raises
``InvalidTransition``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..errors import (
    BreakError, InvalidTransition, RecoverableError, StatsError, cause_chain,
)
from .break_timer import BreakCompleted, BreakOutcome, BreakRequest, OvertimeGranted
from .clock import Clock, SYSTEM_CLOCK, format_clock
from .overtime import OvertimeLedger
from .work_timer import WorkTimer

if TYPE_CHECKING:
    from ..database.store import StatsStore
    from ..settings import Settings

log = logging.getLogger(__name__)

APP_NAME = "Pomogate"
TICK_INTERVAL_MS = 1000


# ── states ────────────────────────────────────────────────────────────────


@dataclass
class Startup:
    pass


@dataclass
class InitialPrompt:
    goal: str = ""


@dataclass
class Running:
    long_break_in: int
    work_timer: WorkTimer
    goal: str = ""
    last_work_session: bool = False
    notified: bool = False


@dataclass
class Finished:
    pass


CycleState = Union[Startup, InitialPrompt, Running, Finished]


# ── messages ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StartupFocus:
    pass


@dataclass(frozen=True)
class GoalChanged:
    text: str


@dataclass(frozen=True)
class GoalSubmitted:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class ToggleLastSession:
    pass


@dataclass(frozen=True)
class EarlyBreak:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class SaveStats:
    pass


@dataclass(frozen=True)
class ReloadStats:
    pass


@dataclass(frozen=True)
class TakeBreak:
    is_long: bool
    early: bool = False


# ── projections ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ErrorOverlay:
    """What went wrong (outermost cause first) and how to retry it."""

    causes: tuple[str, ...]
    retry: Any


@dataclass(frozen=True)
class CycleView:
    """Read-only snapshot handed to the renderer after every event."""

    phase: str
    goal: str = ""
    remaining: float = 0.0
    paused: bool = False
    last_work_session: bool = False
    long_break_in: int = 0
    pomodori_today: int = 0
    off_duration: float = 0.0
    off_percentage: float = 0.0
    duration_today: float = 0.0
    in_overtime: bool = False
    error: ErrorOverlay | None = None


BreakSpawner = Callable[[BreakRequest], BreakOutcome]
Notifier = Callable[[str, str], None]


# ── controller ────────────────────────────────────────────────────────────


class CycleController(QObject):
    """Drives work sessions, breaks and stats for one app session.

    Signals
    -------
    state_changed(view: CycleView)
        Emitted after every processed event.
    focus_requested()
        The goal prompt should grab keyboard focus.
    heads_up()
        The next break is near; emitted once per work stretch.
    finished()
        The cycle reached ``Finished``; the app should exit.
    """

    state_changed = pyqtSignal(object)
    focus_requested = pyqtSignal()
    heads_up = pyqtSignal()
    finished = pyqtSignal()

    def __init__(
        self,
        settings: Settings,
        stats: StatsStore,
        spawn_break: BreakSpawner,
        notify: Notifier,
        parent: QObject | None = None,
        *,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        super().__init__(parent)

        self._settings = settings
        self._stats = stats
        self._spawn_break = spawn_break
        self._notifier = notify
        self._clock = clock

        self._state: CycleState = Startup()
        self._error: ErrorOverlay | None = None
        self._break_in_flight = False
        self._ledger = OvertimeLedger(
            settings.forgive_duration, settings.overtime_duration,
        )
        # Only the day totals survive a restart, never an overtime allowance.
        saved = stats.day_ledger()
        self._ledger.restore(saved.off_duration, saved.duration_today, False)

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_timer)

        self._global_handlers: dict[type, Callable[[Any], None]] = {
            Quit: self._on_quit,
            Retry: self._on_retry,
            SaveStats: self._on_save_stats,
            ReloadStats: self._on_reload_stats,
        }
        self._handlers: dict[tuple[type, type], Callable[[Any], None]] = {
            (Startup, StartupFocus): self._on_startup_focus,
            (InitialPrompt, GoalChanged): self._on_goal_changed,
            (InitialPrompt, GoalSubmitted): self._on_goal_submitted,
            (Running, Tick): self._on_tick,
            (Running, TogglePause): self._on_toggle_pause,
            (Running, ToggleLastSession): self._on_toggle_last_session,
            (Running, EarlyBreak): self._on_early_break,
            (Running, TakeBreak): self._on_take_break,
        }

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def error(self) -> ErrorOverlay | None:
        return self._error

    @property
    def ledger(self) -> OvertimeLedger:
        return self._ledger

    @property
    def is_ticking(self) -> bool:
        return self._qt_timer.isActive()

    def view(self) -> CycleView:
        common = dict(
            pomodori_today=self._stats.daily_pomodori_count(),
            off_duration=self._ledger.off_duration,
            off_percentage=self._ledger.off_percentage,
            duration_today=self._ledger.duration_today,
            in_overtime=self._ledger.in_overtime,
            error=self._error,
        )
        state = self._state
        if isinstance(state, Running):
            return CycleView(
                phase="running",
                goal=state.goal,
                remaining=state.work_timer.remaining,
                paused=state.work_timer.is_paused,
                last_work_session=state.last_work_session,
                long_break_in=state.long_break_in,
                **common,
            )
        if isinstance(state, InitialPrompt):
            return CycleView(phase="prompt", goal=state.goal, **common)
        if isinstance(state, Finished):
            return CycleView(phase="finished", **common)
        return CycleView(phase="startup", **common)

    # ══════════════════════════════════════════════════════════════════
    #  DISPATCH
    # ══════════════════════════════════════════════════════════════════

    def dispatch(self, message: Any) -> None:
        """Process one event, then publish the new view."""
        if self._break_in_flight:
            log.debug("dropped %s while a break is in flight", message)
            return
        if self._error is not None and not isinstance(message, (Retry, Quit)):
            log.debug("dropped %s while the error overlay is up", message)
            return

        try:
            self._handle(message)
        except RecoverableError as exc:
            self._error = ErrorOverlay(
                causes=tuple(cause_chain(exc)), retry=exc.retry,
            )
            log.error("%s", ": ".join(self._error.causes), exc_info=exc)

        self.state_changed.emit(self.view())

    def _handle(self, message: Any) -> None:
        handler = self._global_handlers.get(type(message))
        if handler is None:
            handler = self._handlers.get((type(self._state), type(message)))
        if handler is None:
            raise InvalidTransition(self._state, message)
        handler(message)

    def _on_timer(self) -> None:
        self.dispatch(Tick())

    # ══════════════════════════════════════════════════════════════════
    #  HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_startup_focus(self, _message: StartupFocus) -> None:
        self._state = InitialPrompt()
        self.focus_requested.emit()

    def _on_goal_changed(self, message: GoalChanged) -> None:
        self._state.goal = message.text

    def _on_goal_submitted(self, _message: GoalSubmitted) -> None:
        goal = self._state.goal.strip()
        if not goal:
            return

        now = self._clock.now()
        self._stats.append_work_goal(now, goal)
        self._stats.increment_app_session(now.date())
        self._state = Running(
            long_break_in=self._settings.long_break_every,
            work_timer=WorkTimer(self._settings.work_duration, self._clock),
            goal=goal,
        )
        self._qt_timer.start()
        log.info("first work session started: %s", goal)
        self._persist()

    def _on_tick(self, _message: Tick) -> None:
        state: Running = self._state
        self._ledger.record_work(state.work_timer.tick())
        remaining = state.work_timer.remaining

        # At zero the break window itself is the signal.
        if (
            not state.notified
            and 0.0 < remaining <= self._settings.notification_duration
        ):
            state.notified = True
            self.heads_up.emit()
            self._notify(f"Next break in {format_clock(remaining)}")

        if remaining > 0.0:
            return

        if state.last_work_session:
            self._notify("Last work session is over! Exiting")
            self._save_on_exit()
            self._finish()
            return

        self._begin_break(state, early=False)

    def _on_toggle_pause(self, _message: TogglePause) -> None:
        self._state.work_timer.toggle_pause()

    def _on_toggle_last_session(self, _message: ToggleLastSession) -> None:
        self._state.last_work_session = not self._state.last_work_session

    def _on_early_break(self, _message: EarlyBreak) -> None:
        state: Running = self._state
        self._ledger.record_work(state.work_timer.tick())
        self._ledger.record_early_break(state.work_timer.remaining)
        self._begin_break(state, early=True)

    def _on_take_break(self, message: TakeBreak) -> None:
        state: Running = self._state
        duration = (
            self._settings.long_break_duration if message.is_long
            else self._settings.break_duration
        )
        request = BreakRequest(
            is_long=message.is_long,
            duration=duration,
            overtime=self._ledger.overtime_offer(message.early),
        )

        self._qt_timer.stop()
        self._break_in_flight = True
        try:
            outcome = self._spawn_break(request)
        except Exception as exc:
            raise BreakError("Failed to spawn break timer", retry=message) from exc
        finally:
            self._break_in_flight = False

        if isinstance(outcome, OvertimeGranted):
            log.info("overtime granted: %.0fs", outcome.duration)
            self._ledger.grant_overtime()
            self._restart_work(state, outcome.duration)
            self._persist()
            return
        if not isinstance(outcome, BreakCompleted):
            raise BreakError(
                f"Break window returned {outcome!r}", retry=message,
            )

        log.info(
            "break completed after %.0fs (nominal %.0fs)",
            outcome.elapsed, duration,
            extra={"fields": {
                "elapsed": outcome.elapsed,
                "nominal": duration,
                "long": message.is_long,
            }},
        )
        self._ledger.record_break_completed(outcome.elapsed, duration)
        state.long_break_in -= 1
        if state.long_break_in == 0:
            state.long_break_in = self._settings.long_break_every
        if outcome.goal:
            state.goal = outcome.goal
        self._restart_work(state, self._settings.work_duration)

        now = self._clock.now()
        self._stats.increment_pomodori(now.date())
        if outcome.goal:
            self._stats.append_work_goal(now, outcome.goal)
        self._persist()

    def _on_quit(self, _message: Quit) -> None:
        log.info("quit requested")
        self._error = None
        self._save_on_exit()
        self._finish()

    def _on_retry(self, _message: Retry) -> None:
        overlay = self._error
        if overlay is None:
            return
        self._error = None
        log.info("retrying %s", overlay.retry)
        self._handle(overlay.retry)

    def _on_save_stats(self, _message: SaveStats) -> None:
        self._persist()

    def _on_reload_stats(self, _message: ReloadStats) -> None:
        try:
            reloaded = self._stats.reload_if_date_changed()
        except StatsError as exc:
            raise StatsError("Failed to reload stats", retry=ReloadStats()) from exc
        if reloaded:
            saved = self._stats.day_ledger()
            self._ledger.restore(
                saved.off_duration, saved.duration_today, saved.in_overtime,
            )

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _begin_break(self, state: Running, *, early: bool) -> None:
        self._on_take_break(TakeBreak(is_long=state.long_break_in == 1, early=early))

    def _restart_work(self, state: Running, duration: float) -> None:
        state.work_timer = WorkTimer(duration, self._clock)
        state.notified = False
        self._qt_timer.start()

    def _persist(self) -> None:
        """Save, then reload if the date moved on; save always comes first."""
        self._sync_ledger()
        try:
            self._stats.save()
        except StatsError as exc:
            raise StatsError("Failed to save stats", retry=SaveStats()) from exc
        self._on_reload_stats(ReloadStats())

    def _sync_ledger(self) -> None:
        self._stats.record_day_ledger(
            self._ledger.off_duration,
            self._ledger.duration_today,
            self._ledger.in_overtime,
        )

    def _save_on_exit(self) -> None:
        """Best-effort save of the running day on the way out."""
        state = self._state
        if not isinstance(state, Running):
            return
        self._ledger.record_work(state.work_timer.tick())
        self._sync_ledger()
        try:
            self._stats.save()
        except StatsError as exc:
            log.error("could not save stats on exit", exc_info=exc)

    def _notify(self, body: str) -> None:
        if not self._settings.notifications_enabled:
            return
        try:
            self._notifier(APP_NAME, body)
        except Exception:
            log.warning("notification failed: %s", body, exc_info=True)

    def _finish(self) -> None:
        self._qt_timer.stop()
        self._state = Finished()
        self.finished.emit()
