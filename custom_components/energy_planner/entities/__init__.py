"""Entities module - HA entity definitions using factory pattern.

All entities are thin wrappers that:
- Read from EnergyPlannerState
- Delegate actions to the coordinator
- Use factory pattern for minimal boilerplate
"""

from .buttons import async_setup_buttons
from .select import async_setup_selects
from .sensors import SENSOR_DEFINITIONS, async_setup_sensors
from .switches import SWITCH_DEFINITIONS, async_setup_switches

__all__ = [
    "async_setup_buttons",
    "async_setup_selects",
    "async_setup_sensors",
    "async_setup_switches",
    "SENSOR_DEFINITIONS",
    "SWITCH_DEFINITIONS",
]
