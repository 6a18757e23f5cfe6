"""Data models for the Energy Planner integration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any


class EnergyLevel(str, Enum):
    """Energy state shared by every input and by the resolved output."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNPLANNED = "unplanned"

    @property
    def display_rank(self) -> int:
        """Sort key for display (higher is more energetic)."""
        return _DISPLAY_RANK[self]

    @property
    def description(self) -> str:
        """Human readable label."""
        return _DESCRIPTIONS[self]


_DISPLAY_RANK = {
    EnergyLevel.HIGH: 3,
    EnergyLevel.MEDIUM: 2,
    EnergyLevel.LOW: 1,
    EnergyLevel.UNPLANNED: 0,
}

_DESCRIPTIONS = {
    EnergyLevel.HIGH: "High energy",
    EnergyLevel.MEDIUM: "Medium energy",
    EnergyLevel.LOW: "Low energy",
    EnergyLevel.UNPLANNED: "Unplanned",
}


class TemporaryStateType(str, Enum):
    """Kinds of timed override."""

    FAST_CHARGE = "fast_charge"
    LOW_POWER = "low_power"

    @property
    def level(self) -> EnergyLevel:
        """Energy level forced while the override is active."""
        if self is TemporaryStateType.FAST_CHARGE:
            return EnergyLevel.HIGH
        return EnergyLevel.LOW


class EnergyPriority(IntEnum):
    """Which input decided a resolved level, weakest first."""

    CHECK_IN = 1
    PLAN = 2
    TEMPORARY_STATE = 3
    FOCUS_MODE = 4


@dataclass(frozen=True)
class EnergyPlan:
    """Forward-looking level for one (date, hour) slot."""

    id: str
    date: date
    hour: int
    level: EnergyLevel
    created_at: datetime

    @property
    def timestamp(self) -> datetime:
        """Time used to order plans inside a slot."""
        return self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "hour": self.hour,
            "level": self.level.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnergyPlan:
        """Create from a stored dictionary."""
        return cls(
            id=data["id"],
            date=date.fromisoformat(data["date"]),
            hour=int(data["hour"]),
            level=EnergyLevel(data["level"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass(frozen=True)
class ActualEnergyRecord:
    """Observed level for an hour that has already passed."""

    id: str
    date: date
    hour: int
    level: EnergyLevel
    recorded_at: datetime
    note: str | None = None

    @property
    def timestamp(self) -> datetime:
        """Time used to order records inside a slot."""
        return self.recorded_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "hour": self.hour,
            "level": self.level.value,
            "recorded_at": self.recorded_at.isoformat(),
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActualEnergyRecord:
        """Create from a stored dictionary."""
        return cls(
            id=data["id"],
            date=date.fromisoformat(data["date"]),
            hour=int(data["hour"]),
            level=EnergyLevel(data["level"]),
            recorded_at=datetime.fromisoformat(data["recorded_at"]),
            note=data.get("note"),
        )


@dataclass(frozen=True)
class CheckInChange:
    """One entry of the check-in history."""

    level: EnergyLevel
    changed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "level": self.level.value,
            "changed_at": self.changed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CheckInChange:
        """Create from a stored dictionary."""
        return cls(
            level=EnergyLevel(data["level"]),
            changed_at=datetime.fromisoformat(data["changed_at"]),
        )


@dataclass(frozen=True)
class ToggleChange:
    """Focus mode or boost switched on or off."""

    name: str
    enabled: bool
    changed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "enabled": self.enabled,
            "changed_at": self.changed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToggleChange:
        """Create from a stored dictionary."""
        return cls(
            name=data["name"],
            enabled=bool(data["enabled"]),
            changed_at=datetime.fromisoformat(data["changed_at"]),
        )


@dataclass(frozen=True)
class SessionInterval:
    """A finished temporary session and when it really stopped."""

    type: TemporaryStateType
    started_at: datetime
    ended_at: datetime

    @property
    def level(self) -> EnergyLevel:
        """Level the session forced."""
        return self.type.level

    def covers(self, moment: datetime) -> bool:
        """Whether the session applied at moment."""
        return self.started_at <= moment < self.ended_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "type": self.type.value,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionInterval:
        """Create from a stored dictionary."""
        return cls(
            type=TemporaryStateType(data["type"]),
            started_at=datetime.fromisoformat(data["started_at"]),
            ended_at=datetime.fromisoformat(data["ended_at"]),
        )
