"""Input normalization shared by the engine operations."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..models.data_models import EnergyLevel, TemporaryStateType
from .errors import InvalidArgument


def civil_date(value: Any) -> date:
    """Truncate a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgument(f"Expected a date, got {value!r}")


def validate_hour(value: Any, name: str = "hour") -> int:
    """Check that value is an hour of day (0-23)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 23:
        raise InvalidArgument(f"{name} must be between 0 and 23, got {value}")
    return value


def validate_minute(value: Any) -> int:
    """Check that value is a minute of hour (0-59)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"minute must be an integer, got {value!r}")
    if not 0 <= value <= 59:
        raise InvalidArgument(f"minute must be between 0 and 59, got {value}")
    return value


def parse_level(value: Any) -> EnergyLevel:
    """Coerce a level name into an EnergyLevel."""
    try:
        return EnergyLevel(value)
    except ValueError as err:
        raise InvalidArgument(f"Unknown energy level {value!r}") from err


def parse_state_type(value: Any) -> TemporaryStateType:
    """Coerce a state type name into a TemporaryStateType."""
    try:
        return TemporaryStateType(value)
    except ValueError as err:
        raise InvalidArgument(f"Unknown temporary state type {value!r}") from err
