"""Structured logging for Energy Planner."""

from .event_logger import EnergyLogger, get_logger

__all__ = ["EnergyLogger", "get_logger"]
