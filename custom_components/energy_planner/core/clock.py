"""Injectable time source.

The engine never reads system time directly. Everything that needs "now"
or a periodic tick receives a Clock, so the host decides where time comes
from and tests can drive it by hand. The Home Assistant backed clock is in
ha_clock.py; nothing here imports Home Assistant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable

TickCallback = Callable[[datetime], Any]


class Clock(ABC):
    """Supplies the current time and a periodic tick."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware time."""

    @abstractmethod
    def on_tick(self, interval_seconds: float, callback: TickCallback) -> Callable[[], None]:
        """Call callback(now) every interval_seconds.

        Returns:
            Unsubscribe function
        """


class ManualClock(Clock):
    """Clock that only moves when told to.

    Tick callbacks must be plain functions; they are called synchronously
    from advance() with the clock already set to the tick time.
    """

    def __init__(self, now: datetime) -> None:
        """Initialize the clock at a fixed time."""
        self._now = now
        self._subscribers: list[list[Any]] = []

    def now(self) -> datetime:
        """Return the current manual time."""
        return self._now

    def set(self, now: datetime) -> None:
        """Jump to a time without firing ticks."""
        self._now = now
        for subscriber in self._subscribers:
            subscriber[2] = now + subscriber[0]

    def advance(self, delta: timedelta) -> None:
        """Move time forward, firing every tick that falls due on the way."""
        target = self._now + delta
        while True:
            due = [s for s in self._subscribers if s[2] <= target]
            if not due:
                break
            subscriber = min(due, key=lambda s: s[2])
            self._now = subscriber[2]
            subscriber[2] = subscriber[2] + subscriber[0]
            subscriber[1](self._now)
        self._now = target

    def on_tick(self, interval_seconds: float, callback: TickCallback) -> Callable[[], None]:
        """Register a tick callback."""
        interval = timedelta(seconds=interval_seconds)
        subscriber = [interval, callback, self._now + interval]
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            self._subscribers = [s for s in self._subscribers if s is not subscriber]

        return unsubscribe
