"""Daily check-in: today's baseline plus two independent toggles."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..models.data_models import CheckInChange, EnergyLevel, ToggleChange
from ..planner_logging import get_logger
from .validation import civil_date, parse_level

FOCUS_MODE = "focus_mode"
BOOST = "boost"


class DailyCheckIn:
    """The lowest-priority resolution input.

    The resolver reads ``level``, ``focus_mode_on`` and ``boost_active``.
    The two history logs are only replayed by the elapsed summary.
    """

    def __init__(self, level: Any = EnergyLevel.MEDIUM) -> None:
        """Initialize with a baseline level and both toggles off."""
        self.level: EnergyLevel = parse_level(level)
        self.focus_mode_on = False
        self.boost_active = False
        self.history: list[CheckInChange] = []
        self.toggles: list[ToggleChange] = []
        self._logger = get_logger()

    def set_level(self, level: Any, now: datetime) -> CheckInChange:
        """Change the baseline and log the change."""
        new_level = parse_level(level)
        change = CheckInChange(level=new_level, changed_at=now)
        old_level, self.level = self.level, new_level
        self.history.append(change)
        self._logger.info("CHECK_IN_SET", old=old_level.value, new=new_level.value)
        return change

    def set_focus_mode(self, enabled: bool, now: datetime | None = None) -> None:
        """Toggle focus mode.

        Without a time the change is not logged and the elapsed summary
        never sees it.
        """
        self.focus_mode_on = bool(enabled)
        self._log_toggle(FOCUS_MODE, self.focus_mode_on, now)
        self._logger.info("FOCUS_MODE_SET", enabled=self.focus_mode_on)

    def set_boost(self, enabled: bool, now: datetime | None = None) -> None:
        """Toggle the open-ended energy boost."""
        self.boost_active = bool(enabled)
        self._log_toggle(BOOST, self.boost_active, now)
        self._logger.info("BOOST_SET", enabled=self.boost_active)

    def _log_toggle(self, name: str, enabled: bool, now: datetime | None) -> None:
        if now is not None:
            self.toggles.append(ToggleChange(name=name, enabled=enabled, changed_at=now))

    def changes_on(self, day: Any) -> list[CheckInChange]:
        """History entries made on one calendar day."""
        target = civil_date(day)
        return [change for change in self.history if change.changed_at.date() == target]

    def first_checked_in_at(self, day: date) -> datetime | None:
        """First change on day that set a real (not unplanned) level."""
        for change in self.changes_on(day):
            if change.level is not EnergyLevel.UNPLANNED:
                return change.changed_at
        return None

    def level_at(self, moment: datetime) -> EnergyLevel | None:
        """Baseline in force at moment, or None before any check-in."""
        level = None
        for change in self.history:
            if change.changed_at <= moment:
                level = change.level
        return level

    def toggle_on_at(self, name: str, moment: datetime) -> bool:
        """Whether a logged toggle was on at moment."""
        enabled = False
        for change in self.toggles:
            if change.name == name and change.changed_at <= moment:
                enabled = change.enabled
        return enabled

    def change_times(self) -> list[datetime]:
        """Every logged check-in and toggle time."""
        return [c.changed_at for c in self.history] + [t.changed_at for t in self.toggles]

    def to_dict(self) -> dict[str, Any]:
        """Export check-in state and history."""
        return {
            "level": self.level.value,
            "focus_mode_on": self.focus_mode_on,
            "boost_active": self.boost_active,
            "history": [change.to_dict() for change in self.history],
            "toggles": [change.to_dict() for change in self.toggles],
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Restore from exported data."""
        self.level = EnergyLevel(data.get("level", self.level.value))
        self.focus_mode_on = bool(data.get("focus_mode_on", False))
        self.boost_active = bool(data.get("boost_active", False))
        self.history = [CheckInChange.from_dict(item) for item in data.get("history", [])]
        self.toggles = [ToggleChange.from_dict(item) for item in data.get("toggles", [])]
