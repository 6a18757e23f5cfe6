"""Single Source of Truth - all planner state in one place.

EnergyPlannerState owns the plan store, the temporary session and the daily
check-in, and wires the resolver and the day summary on top of them. Entities
and services read and write through this object only.
"""

from __future__ import annotations

from typing import Any

from ..domain import (
    DailyCheckIn,
    DaySummary,
    EnergyResolver,
    PlanStore,
    TemporaryStateSession,
)
from ..domain.session import DEFAULT_STEP_MINUTES
from ..models import EnergyLevel
from ..planner_logging import get_logger
from .clock import Clock


class EnergyPlannerState:
    """Everything the planner knows, built around one clock."""

    def __init__(
        self,
        clock: Clock,
        default_level: Any = EnergyLevel.MEDIUM,
        step_minutes: int = DEFAULT_STEP_MINUTES,
        day_start_hour: int = 7,
        day_end_hour: int = 23,
    ) -> None:
        """Initialize empty state.

        Args:
            clock: Time source shared by every component
            default_level: Check-in level before the first check-in
            step_minutes: Rounding step for the session's max duration
            day_start_hour: First hour of the summary window
            day_end_hour: Last hour of the summary window
        """
        self.clock = clock
        self.plan_store = PlanStore(clock)
        self.session = TemporaryStateSession(step_minutes=step_minutes)
        self.check_in = DailyCheckIn(default_level)
        self.resolver = EnergyResolver(clock, self.plan_store, self.session, self.check_in)
        self.summary = DaySummary(
            clock,
            self.plan_store,
            self.session,
            self.check_in,
            day_start_hour=day_start_hour,
            day_end_hour=day_end_hour,
        )
        self._logger = get_logger()

    def to_dict(self) -> dict[str, Any]:
        """Export full state for storage."""
        return {
            "plan_store": self.plan_store.to_dict(),
            "session": self.session.to_dict(),
            "check_in": self.check_in.to_dict(),
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Restore previously exported state.

        Sections that are missing keep their current contents.
        """
        if "plan_store" in data:
            self.plan_store.load_dict(data["plan_store"])
        if "session" in data:
            self.session.load_dict(data["session"])
        if "check_in" in data:
            self.check_in.load_dict(data["check_in"])
        self._logger.info(
            "STATE_RESTORED",
            plans=len(self.plan_store.all_plans()),
            records=len(self.plan_store.all_actual_records()),
            session=self.session.state.value,
        )

    @classmethod
    def from_dict(cls, clock: Clock, data: dict[str, Any], **kwargs: Any) -> EnergyPlannerState:
        """Build a state object from exported data."""
        state = cls(clock, **kwargs)
        state.load_dict(data)
        return state
