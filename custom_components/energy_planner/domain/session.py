"""Timed temporary override (fast charge / low power).

A single slot state machine with two states:

    IDLE --start()--> ACTIVE --end() / check_expiration()--> IDLE

Starting while ACTIVE replaces the running session. There is never a queue.

Sessions that have stopped are kept for the current day so the elapsed
summary can replay them.

Expiry is detected by the host calling check_expiration() from its tick;
skipping ticks is harmless, the next call just sees a larger overshoot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Any

from ..models.data_models import EnergyLevel, SessionInterval, TemporaryStateType
from ..planner_logging import get_logger
from .errors import InvalidArgument
from .validation import parse_state_type

DEFAULT_STEP_MINUTES = 15
DEFAULT_SESSION_DURATION = timedelta(hours=2)


class SessionState(str, Enum):
    """State of the session slot."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class TemporaryState:
    """One running override."""

    type: TemporaryStateType
    started_at: datetime
    duration: timedelta

    @property
    def expires_at(self) -> datetime:
        """When the override stops applying."""
        return self.started_at + self.duration

    @property
    def level(self) -> EnergyLevel:
        """Level forced by this override."""
        return self.type.level

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "type": self.type.value,
            "started_at": self.started_at.isoformat(),
            "duration_seconds": self.duration.total_seconds(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemporaryState:
        """Create from a stored dictionary."""
        return cls(
            type=TemporaryStateType(data["type"]),
            started_at=datetime.fromisoformat(data["started_at"]),
            duration=timedelta(seconds=float(data["duration_seconds"])),
        )


def format_countdown(remaining: timedelta) -> str:
    """Format a countdown as H:MM:SS, or MM:SS under one hour."""
    total_seconds = max(0, int(remaining.total_seconds()))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


class TemporaryStateSession:
    """Holds at most one TemporaryState."""

    def __init__(self, step_minutes: int = DEFAULT_STEP_MINUTES) -> None:
        """Initialize in the IDLE state.

        Args:
            step_minutes: Granularity that max_allowed() is rounded down to
        """
        if step_minutes <= 0:
            raise InvalidArgument("step_minutes must be positive")
        self._step = timedelta(minutes=step_minutes)
        self._current: TemporaryState | None = None
        self.history: list[SessionInterval] = []
        self._logger = get_logger()

    @property
    def current(self) -> TemporaryState | None:
        """The stored session, expired or not."""
        return self._current

    @property
    def state(self) -> SessionState:
        """IDLE or ACTIVE, as of the last transition."""
        return SessionState.IDLE if self._current is None else SessionState.ACTIVE

    def max_allowed(self, now: datetime) -> timedelta:
        """Time left until the next midnight, rounded down to the step.

        Keeps a session from silently running into the next day.
        """
        next_midnight = datetime.combine(
            now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo
        )
        remaining = next_midnight - now
        return (remaining // self._step) * self._step

    def default_duration(
        self,
        now: datetime,
        preferred: timedelta = DEFAULT_SESSION_DURATION,
    ) -> timedelta:
        """Duration used when the caller does not pick one.

        The preferred length, cut short so it still ends before midnight.
        """
        return min(preferred, self.max_allowed(now))

    def start(
        self,
        state_type: Any,
        duration: timedelta,
        now: datetime,
    ) -> TemporaryState:
        """Start a session, replacing any running one.

        Raises:
            InvalidArgument: duration is not positive or exceeds max_allowed(now)
        """
        kind = parse_state_type(state_type)
        if not isinstance(duration, timedelta):
            raise InvalidArgument(f"duration must be a timedelta, got {duration!r}")
        if duration <= timedelta(0):
            raise InvalidArgument("duration must be positive")
        max_allowed = self.max_allowed(now)
        if duration > max_allowed:
            raise InvalidArgument(
                f"duration {duration} exceeds the {max_allowed} left today"
            )

        replaced = self._current
        if replaced is not None:
            self._remember(replaced, min(now, replaced.expires_at))
        self._current = TemporaryState(type=kind, started_at=now, duration=duration)
        self._logger.info(
            "SESSION_STARTED",
            type=kind.value,
            duration_s=int(duration.total_seconds()),
            expires_at=self._current.expires_at.isoformat(),
            replaced=replaced.type.value if replaced else None,
        )
        return self._current

    def end(self, now: datetime | None = None) -> TemporaryState | None:
        """Cancel the session. Safe to call when IDLE.

        Without a time the ended session is not kept in the history.
        """
        ended, self._current = self._current, None
        if ended is not None:
            if now is not None:
                self._remember(ended, min(now, ended.expires_at))
            self._logger.info("SESSION_ENDED", type=ended.type.value)
        return ended

    def check_expiration(self, now: datetime) -> TemporaryState | None:
        """Move to IDLE if the session has run out.

        Returns:
            The session that expired on this call, otherwise None
        """
        if self._current is None or now < self._current.expires_at:
            return None
        expired, self._current = self._current, None
        self._remember(expired, expired.expires_at)
        self._logger.info(
            "SESSION_EXPIRED",
            type=expired.type.value,
            overshoot_s=int((now - expired.expires_at).total_seconds()),
        )
        return expired

    def _remember(self, session: TemporaryState, ended_at: datetime) -> None:
        """Keep a stopped session, dropping ones from earlier days."""
        day = ended_at.date()
        self.history = [i for i in self.history if i.ended_at.date() >= day]
        if ended_at > session.started_at:
            self.history.append(
                SessionInterval(type=session.type, started_at=session.started_at, ended_at=ended_at)
            )

    def intervals(self) -> list[SessionInterval]:
        """Stopped sessions plus the running one, cut at its expiry."""
        intervals = list(self.history)
        if self._current is not None:
            intervals.append(
                SessionInterval(
                    type=self._current.type,
                    started_at=self._current.started_at,
                    ended_at=self._current.expires_at,
                )
            )
        return intervals

    def is_active(self, now: datetime) -> bool:
        """Whether a session exists and has not yet run out at now."""
        return self._current is not None and now < self._current.expires_at

    def active_level(self, now: datetime) -> EnergyLevel | None:
        """Level forced at now, or None."""
        if self.is_active(now):
            return self._current.level
        return None

    def remaining_time(self, now: datetime) -> timedelta:
        """Time left, never negative; zero while IDLE."""
        if self._current is None:
            return timedelta(0)
        return max(timedelta(0), self._current.expires_at - now)

    def to_dict(self) -> dict[str, Any]:
        """Export the slot."""
        return {
            "current": self._current.to_dict() if self._current else None,
            "history": [interval.to_dict() for interval in self.history],
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Restore the slot from exported data."""
        current = data.get("current")
        self._current = TemporaryState.from_dict(current) if current else None
        self.history = [SessionInterval.from_dict(item) for item in data.get("history", [])]
