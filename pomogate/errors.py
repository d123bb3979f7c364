"""Exception hierarchy for Pomogate.

``SettingsError`` is fatal at startup.  ``RecoverableError`` subclasses
carry the controller message that retries the failed operation; the
controller turns them into an error overlay instead of crashing.
``InvalidTransition`` marks a broken event-routing contract and is never
caught.
"""

from __future__ import annotations

from typing import Any


class PomogateError(Exception):
    """Base class for every error raised on purpose by Pomogate."""


class SettingsError(PomogateError):
    """The configuration file is unreadable or holds invalid values."""


class RecoverableError(PomogateError):
    """A failed side effect that the user can retry.

    ``retry`` is the controller message that repeats the exact operation.
    """

    def __init__(self, message: str, *, retry: Any = None) -> None:
        super().__init__(message)
        self.retry = retry


class StatsError(RecoverableError):
    """Reading, decoding, encoding or writing the stats file failed."""


class BreakError(RecoverableError):
    """The break window could not run or returned no outcome."""


class NotificationError(PomogateError):
    """A desktop notification could not be delivered."""


class InvalidTransition(RuntimeError):
    """An event arrived in a state that has no transition for it."""

    def __init__(self, state: object, message: object) -> None:
        super().__init__(
            f"no transition for {type(message).__name__} "
            f"in state {type(state).__name__}"
        )
        self.state = state
        self.message = message


def cause_chain(exc: BaseException) -> list[str]:
    """Render *exc* and everything it was raised from, outermost first."""
    chain: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        chain.append(text)
        current = current.__cause__ or current.__context__
    return chain
