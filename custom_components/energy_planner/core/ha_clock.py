"""Clock backed by Home Assistant's time helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from homeassistant.core import HomeAssistant
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

from .clock import Clock, TickCallback


class HomeAssistantClock(Clock):
    """Local time from dt_util and ticks from async_track_time_interval."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the clock."""
        self.hass = hass

    def now(self) -> datetime:
        """Return the current local time."""
        return dt_util.now()

    def on_tick(self, interval_seconds: float, callback: TickCallback) -> Callable[[], None]:
        """Track a fixed interval on the HA event loop."""
        return async_track_time_interval(
            self.hass, callback, timedelta(seconds=interval_seconds)
        )
