"""Data models for Energy Planner."""

from .data_models import (
    ActualEnergyRecord,
    CheckInChange,
    EnergyLevel,
    EnergyPlan,
    EnergyPriority,
    SessionInterval,
    TemporaryStateType,
    ToggleChange,
)

__all__ = [
    "ActualEnergyRecord",
    "CheckInChange",
    "EnergyLevel",
    "EnergyPlan",
    "EnergyPriority",
    "SessionInterval",
    "TemporaryStateType",
    "ToggleChange",
]
