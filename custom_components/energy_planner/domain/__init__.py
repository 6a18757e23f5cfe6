"""Domain logic module - pure planning logic without HA dependencies.

Everything here takes its time from an injected Clock and never touches
Home Assistant directly, so it can be driven by hand in unit tests.
"""

from .check_in import DailyCheckIn
from .errors import InvalidArgument
from .plan_store import PlanStore, group_by_date
from .resolver import EnergyResolver, Resolution
from .session import TemporaryState, TemporaryStateSession, format_countdown
from .summary import DaySummary, format_minutes

__all__ = [
    "DailyCheckIn",
    "DaySummary",
    "EnergyResolver",
    "InvalidArgument",
    "PlanStore",
    "Resolution",
    "TemporaryState",
    "TemporaryStateSession",
    "format_countdown",
    "format_minutes",
    "group_by_date",
]
