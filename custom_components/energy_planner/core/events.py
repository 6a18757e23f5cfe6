"""Event Bus for component communication.

State changes made by the coordinator are announced here. Every event is
logged, handed to registered handlers, and, when it changes what entities
display, forwarded to the Home Assistant dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.util import dt as dt_util

from ..const import SIGNAL_UPDATE
from ..planner_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class EnergyEvent(str, Enum):
    """Event types for the Energy Planner integration."""

    # Check-in
    CHECK_IN_SET = "energy_planner.check_in_set"
    FOCUS_MODE_CHANGED = "energy_planner.focus_mode_changed"
    BOOST_CHANGED = "energy_planner.boost_changed"

    # Plans and records
    PLAN_UPDATED = "energy_planner.plan_updated"
    PLAN_CLEARED = "energy_planner.plan_cleared"
    ACTUAL_RECORDED = "energy_planner.actual_recorded"

    # Temporary session
    SESSION_STARTED = "energy_planner.session_started"
    SESSION_ENDED = "energy_planner.session_ended"
    SESSION_EXPIRED = "energy_planner.session_expired"


# Every event above changes something an entity shows.
UI_EVENTS = frozenset(EnergyEvent)


@dataclass
class EventData:
    """Container for event data."""

    event: EnergyEvent
    timestamp: datetime
    data: dict[str, Any]


EventHandler = Callable[[EventData], Awaitable[None]]


class EnergyEventBus:
    """Central event bus for the integration."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the event bus.

        Args:
            hass: Home Assistant instance
        """
        self.hass = hass
        self._logger = get_logger()
        self._handlers: dict[EnergyEvent, list[EventHandler]] = {}

        self._logger.info("EVENT_BUS_INITIALIZED")

    async def emit(self, event: EnergyEvent, **data: Any) -> None:
        """Emit an event.

        Args:
            event: Event type to emit
            **data: Event data
        """
        event_data = EventData(event=event, timestamp=dt_util.now(), data=data)

        self._logger.debug(f"EVENT_{event.name}", **data)

        for handler in list(self._handlers.get(event, [])):
            try:
                await handler(event_data)
            except Exception as ex:  # handlers must not break the emitter
                self._logger.error(
                    "EVENT_HANDLER_ERROR",
                    event=event.name,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(ex),
                )

        if event in UI_EVENTS:
            async_dispatcher_send(self.hass, SIGNAL_UPDATE)

    def on(self, event: EnergyEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: EnergyEvent, handler: EventHandler) -> None:
        """Unregister an event handler."""
        if event in self._handlers and handler in self._handlers[event]:
            self._handlers[event].remove(handler)
