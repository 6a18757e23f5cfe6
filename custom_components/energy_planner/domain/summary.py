"""Per-day aggregates over plans, check-ins and session history."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any

from ..models.data_models import EnergyLevel, SessionInterval
from .check_in import BOOST, FOCUS_MODE
from .errors import InvalidArgument
from .validation import civil_date, validate_hour

if TYPE_CHECKING:
    from ..core.clock import Clock
    from .check_in import DailyCheckIn
    from .plan_store import PlanStore
    from .session import TemporaryStateSession


def empty_totals() -> dict[EnergyLevel, int]:
    """Zero for every level, in display order."""
    return {level: 0 for level in EnergyLevel}


def format_minutes(minutes: int) -> str:
    """1h30m, 2h or 45m."""
    hours, rest = divmod(int(minutes), 60)
    if hours and rest:
        return f"{hours}h{rest}m"
    if hours:
        return f"{hours}h"
    return f"{rest}m"


def describe_totals(totals: dict[EnergyLevel, int], unit: str = "minutes") -> str:
    """One line like "high 2h | low 45m", skipping empty levels."""
    parts = []
    for level, amount in totals.items():
        if amount <= 0:
            continue
        value = format_minutes(amount) if unit == "minutes" else f"{amount}h"
        parts.append(f"{level.value} {value}")
    return " | ".join(parts) if parts else "none"


class DaySummary:
    """Hours planned per level and minutes spent per level."""

    def __init__(
        self,
        clock: Clock,
        plans: PlanStore,
        session: TemporaryStateSession,
        check_in: DailyCheckIn,
        day_start_hour: int = 7,
        day_end_hour: int = 23,
    ) -> None:
        """Initialize.

        Args:
            day_start_hour: First hour of the display window
            day_end_hour: Last hour of the display window (inclusive)
        """
        validate_hour(day_start_hour, "day_start_hour")
        validate_hour(day_end_hour, "day_end_hour")
        if day_start_hour > day_end_hour:
            raise InvalidArgument("day_start_hour must not be after day_end_hour")
        self._clock = clock
        self._plans = plans
        self._session = session
        self._check_in = check_in
        self.day_start_hour = day_start_hour
        self.day_end_hour = day_end_hour

    @property
    def hours(self) -> range:
        """Hours of the display window."""
        return range(self.day_start_hour, self.day_end_hour + 1)

    def plan_summary(self, day: Any) -> dict[EnergyLevel, int]:
        """Number of window hours planned at each level on day.

        Hours without a plan count at the current baseline. Focus mode,
        sessions and boost are live overrides and are left out.
        """
        target = civil_date(day)
        totals = empty_totals()
        for hour in self.hours:
            plan = self._plans.plan_for(target, hour)
            totals[plan.level if plan is not None else self._check_in.level] += 1
        return totals

    def elapsed_summary(self, now: datetime | None = None) -> dict[EnergyLevel, int]:
        """Minutes of today's window spent in each level, up to now.

        Minutes before the first real check-in of the day count as
        UNPLANNED. After it, an hour with an actual record counts at the
        recorded level. Other minutes replay what was in force at the
        time: focus mode, a session, boost, the plan, then the baseline.
        The window is cut at every change, so the level is constant
        inside each piece.
        """
        if now is None:
            now = self._clock.now()
        today = now.date()
        totals = empty_totals()

        window_start = datetime.combine(today, time(self.day_start_hour), tzinfo=now.tzinfo)
        window_end = datetime.combine(today, time.min, tzinfo=now.tzinfo) + timedelta(
            hours=self.day_end_hour + 1
        )
        upto = min(now, window_end)
        if upto <= window_start:
            return totals

        first = self._check_in.first_checked_in_at(today)
        intervals = self._session.intervals()

        cuts = {window_start + timedelta(hours=n) for n in range(len(self.hours))}
        cuts.update(self._check_in.change_times())
        for interval in intervals:
            cuts.update((interval.started_at, interval.ended_at))
        if first is not None:
            cuts.add(first)
        edges = sorted({window_start, upto} | {c for c in cuts if window_start < c < upto})

        seconds = {level: 0.0 for level in totals}
        for start, end in zip(edges, edges[1:]):
            level = self._level_during(today, start, first, intervals)
            seconds[level] += (end - start).total_seconds()

        for level, value in seconds.items():
            totals[level] = int(value // 60)
        return totals

    def _level_during(
        self,
        today: date,
        moment: datetime,
        first: datetime | None,
        intervals: list[SessionInterval],
    ) -> EnergyLevel:
        """Level that applied at a past moment of today."""
        if first is None or moment < first:
            return EnergyLevel.UNPLANNED

        hour = moment.hour
        actual = self._plans.actual_level_at(today, hour)
        if actual is not None:
            return actual

        if self._check_in.toggle_on_at(FOCUS_MODE, moment):
            return EnergyLevel.HIGH
        for interval in intervals:
            if interval.covers(moment):
                return interval.level
        if self._check_in.toggle_on_at(BOOST, moment):
            return EnergyLevel.HIGH

        plan = self._plans.plan_for(today, hour)
        if plan is not None:
            return plan.level
        return self._check_in.level_at(moment) or self._check_in.level
