"""Select entity for the daily check-in."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.select import SelectEntity
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import EnergyPlannerCoordinator

from ..const import DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE
from ..models import EnergyLevel
from ..planner_logging import get_logger


class DailyCheckInSelect(SelectEntity):
    """Pick today's baseline energy level."""

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_icon = "mdi:clipboard-pulse-outline"
    _attr_options = [level.value for level in EnergyLevel]

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_daily_check_in"
        self._attr_name = "Daily Check-in"

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Energy Planner",
        )

    @property
    def current_option(self) -> str:
        """Return the current check-in level."""
        return self._coordinator.state.check_in.level.value

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )

    @callback
    def _handle_update(self) -> None:
        self.async_write_ha_state()

    async def async_select_option(self, option: str) -> None:
        """Check in with the chosen level."""
        self._logger.info("CHECK_IN_SELECTED", level=option)
        await self._coordinator.set_check_in(option)


async def async_setup_selects(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: EnergyPlannerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up select entities."""
    async_add_entities([DailyCheckInSelect(entry.entry_id, coordinator)])
