"""Effective energy level for any slot.

Priority, first match wins:

1. Focus mode on                 -> HIGH
2. Running temporary session     -> its level (checked against now, so it
                                    overrides every queried slot)
   Boost flag                    -> HIGH (a timed session wins over it)
3. Plan for (date, hour)         -> plan level
4. Otherwise                     -> daily check-in level

Later, shorter-lived and more specific intents beat earlier, broader ones.
The resolver keeps no state of its own and never raises for missing data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..models.data_models import EnergyLevel, EnergyPriority
from .validation import civil_date, validate_hour, validate_minute

if TYPE_CHECKING:
    from ..core.clock import Clock
    from .check_in import DailyCheckIn
    from .plan_store import PlanStore
    from .session import TemporaryStateSession


@dataclass(frozen=True)
class Resolution:
    """Resolved level and the input that decided it."""

    level: EnergyLevel
    source: EnergyPriority


class EnergyResolver:
    """Combines the four inputs into one level."""

    def __init__(
        self,
        clock: Clock,
        plans: PlanStore,
        session: TemporaryStateSession,
        check_in: DailyCheckIn,
    ) -> None:
        """Initialize with references to the stores it reads."""
        self._clock = clock
        self._plans = plans
        self._session = session
        self._check_in = check_in

    def resolve(self, day: Any, hour: int, minute: int | None = None) -> EnergyLevel:
        """Effective level for (day, hour[, minute])."""
        return self.resolve_with_source(day, hour, minute).level

    def resolve_with_source(
        self,
        day: Any,
        hour: int,
        minute: int | None = None,
    ) -> Resolution:
        """Effective level plus the priority tier that produced it.

        Raises:
            InvalidArgument: day is not a date or hour/minute is out of range
        """
        target = civil_date(day)
        hour = validate_hour(hour)
        if minute is not None:
            validate_minute(minute)

        if self._check_in.focus_mode_on:
            return Resolution(EnergyLevel.HIGH, EnergyPriority.FOCUS_MODE)

        session_level = self._session.active_level(self._clock.now())
        if session_level is not None:
            return Resolution(session_level, EnergyPriority.TEMPORARY_STATE)

        if self._check_in.boost_active:
            return Resolution(EnergyLevel.HIGH, EnergyPriority.TEMPORARY_STATE)

        plan = self._plans.plan_for(target, hour)
        if plan is not None:
            return Resolution(plan.level, EnergyPriority.PLAN)

        return Resolution(self._check_in.level, EnergyPriority.CHECK_IN)

    def resolve_now(self) -> Resolution:
        """Resolution for the clock's current slot."""
        now = self._clock.now()
        return self.resolve_with_source(now.date(), now.hour, now.minute)
