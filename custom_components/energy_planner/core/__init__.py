"""Core module for Energy Planner.

Contains the fundamental building blocks:
- Clock: Injectable time source (ha_clock.py holds the Home Assistant one)
- State: Single source of truth for all state
- Events: Event bus for component communication (core/events.py)
"""

from .clock import Clock, ManualClock
from .state import EnergyPlannerState

__all__ = ["Clock", "EnergyPlannerState", "ManualClock"]
