"""Forward plans and retrospective records.

Plans are a slot map: at most one EnergyPlan per (date, hour), kept in a
dict keyed by slot so every upsert is a single replace. Actual records are
an append-only log where several records for one slot are allowed.

All dates are truncated to calendar days on the way in, so every later
"same day" check is a plain date comparison.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar

from ..models.data_models import ActualEnergyRecord, EnergyLevel, EnergyPlan
from ..planner_logging import get_logger
from .errors import InvalidArgument
from .validation import civil_date, parse_level, validate_hour

if TYPE_CHECKING:
    from ..core.clock import Clock

Slot = tuple[date, int]
RecordT = TypeVar("RecordT", EnergyPlan, ActualEnergyRecord)


def group_by_date(records: Iterable[RecordT]) -> dict[date, list[RecordT]]:
    """Group plans or records by calendar day.

    Keys come out in ascending date order and each list is sorted by hour,
    then by the time the entry was written.
    """
    grouped: dict[date, list[RecordT]] = {}
    for record in records:
        grouped.setdefault(record.date, []).append(record)
    return {
        day: sorted(grouped[day], key=lambda r: (r.hour, r.timestamp))
        for day in sorted(grouped)
    }


class PlanStore:
    """Owns every EnergyPlan and ActualEnergyRecord."""

    def __init__(self, clock: Clock) -> None:
        """Initialize an empty store."""
        self._clock = clock
        self._plans: dict[Slot, EnergyPlan] = {}
        self._records: list[ActualEnergyRecord] = []
        self._logger = get_logger()

    # ========== Plans ==========

    def upsert_plan(self, day: Any, hour: int, level: Any) -> list[EnergyPlan]:
        """Replace whatever plan occupies (day, hour).

        An UNPLANNED level clears the slot instead of storing a plan.

        Returns:
            The plans written (empty when the slot was cleared)
        """
        return self.upsert_plan_range(day, hour, hour, level)

    def upsert_plan_range(
        self,
        day: Any,
        hour_start: int,
        hour_end: int,
        level: Any,
    ) -> list[EnergyPlan]:
        """Overwrite every slot in [hour_start, hour_end] on one day.

        The whole range is validated before the store is touched, so a bad
        call never leaves a half-written range behind.

        Returns:
            The plans written, ascending by hour
        """
        target = civil_date(day)
        hour_start = validate_hour(hour_start, "hour_start")
        hour_end = validate_hour(hour_end, "hour_end")
        if hour_start > hour_end:
            raise InvalidArgument(
                f"hour_start ({hour_start}) must not be after hour_end ({hour_end})"
            )
        energy_level = parse_level(level)

        created_at = self._clock.now()
        written: list[EnergyPlan] = []
        for hour in range(hour_start, hour_end + 1):
            if energy_level is EnergyLevel.UNPLANNED:
                self._plans.pop((target, hour), None)
                continue
            plan = EnergyPlan(
                id=uuid.uuid4().hex,
                date=target,
                hour=hour,
                level=energy_level,
                created_at=created_at,
            )
            self._plans[(target, hour)] = plan
            written.append(plan)

        self._logger.info(
            "PLAN_UPSERTED",
            date=target.isoformat(),
            hours=f"{hour_start}-{hour_end}",
            level=energy_level.value,
        )
        return written

    def clear_plan(self, day: Any, hour: int) -> EnergyPlan | None:
        """Remove the plan at (day, hour) if there is one."""
        target = civil_date(day)
        hour = validate_hour(hour)
        removed = self._plans.pop((target, hour), None)
        if removed is not None:
            self._logger.info("PLAN_CLEARED", date=target.isoformat(), hour=hour)
        return removed

    def plan_for(self, day: Any, hour: int) -> EnergyPlan | None:
        """Return the plan at (day, hour), or None."""
        return self._plans.get((civil_date(day), validate_hour(hour)))

    def plans_for_date(self, day: Any) -> list[EnergyPlan]:
        """Plans of one day, ascending by hour."""
        target = civil_date(day)
        return sorted(
            (plan for (plan_date, _), plan in self._plans.items() if plan_date == target),
            key=lambda plan: plan.hour,
        )

    def all_plans(self) -> list[EnergyPlan]:
        """Every plan, ascending by (date, hour)."""
        return [self._plans[slot] for slot in sorted(self._plans)]

    def has_plans(self, day: Any) -> bool:
        """Whether any slot on day is planned."""
        target = civil_date(day)
        return any(plan_date == target for plan_date, _ in self._plans)

    def planned_dates(self) -> list[date]:
        """Days from today onwards that have at least one plan."""
        today = self._clock.now().date()
        return sorted({plan_date for plan_date, _ in self._plans if plan_date >= today})

    # ========== Actual records ==========

    def append_actual_record(self, record: ActualEnergyRecord) -> ActualEnergyRecord:
        """Append a record; no overwrite and no dedup.

        The date is truncated to its calendar day and the level parsed
        before anything is stored.
        """
        validate_hour(record.hour)
        record = replace(
            record, date=civil_date(record.date), level=parse_level(record.level)
        )
        self._records.append(record)
        self._logger.debug(
            "ACTUAL_RECORD_APPENDED",
            date=record.date.isoformat(),
            hour=record.hour,
            level=record.level.value,
        )
        return record

    def record_actual(
        self,
        day: Any,
        hour: int,
        level: Any,
        note: str | None = None,
    ) -> ActualEnergyRecord:
        """Build a record stamped with the clock and append it."""
        record = ActualEnergyRecord(
            id=uuid.uuid4().hex,
            date=civil_date(day),
            hour=validate_hour(hour),
            level=parse_level(level),
            recorded_at=self._clock.now(),
            note=note,
        )
        return self.append_actual_record(record)

    def actual_records_for_date(self, day: Any) -> list[ActualEnergyRecord]:
        """Records of one day, ascending by hour then record time."""
        target = civil_date(day)
        return sorted(
            (record for record in self._records if record.date == target),
            key=lambda record: (record.hour, record.recorded_at),
        )

    def actual_level_at(self, day: Any, hour: int) -> EnergyLevel | None:
        """Latest recorded level for (day, hour), or None."""
        target = civil_date(day)
        hour = validate_hour(hour)
        latest: ActualEnergyRecord | None = None
        for record in self._records:
            if record.date == target and record.hour == hour:
                if latest is None or record.recorded_at >= latest.recorded_at:
                    latest = record
        return latest.level if latest else None

    def all_actual_records(self) -> list[ActualEnergyRecord]:
        """Every record in insertion order."""
        return list(self._records)

    def recorded_dates(self) -> list[date]:
        """Days up to and including today that have records."""
        today = self._clock.now().date()
        return sorted({record.date for record in self._records if record.date <= today})

    # ========== Serialization ==========

    def to_dict(self) -> dict[str, Any]:
        """Export plans and records."""
        return {
            "plans": [plan.to_dict() for plan in self.all_plans()],
            "actual_records": [record.to_dict() for record in self._records],
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Replace contents with previously exported data."""
        self._plans = {}
        for item in data.get("plans", []):
            plan = EnergyPlan.from_dict(item)
            self._plans[(plan.date, plan.hour)] = plan
        self._records = [
            ActualEnergyRecord.from_dict(item) for item in data.get("actual_records", [])
        ]
