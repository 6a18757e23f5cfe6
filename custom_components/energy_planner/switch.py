"""Switch platform for Energy Planner."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import EnergyPlannerCoordinator
from .entities.switches import async_setup_switches


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switch entities."""
    coordinator: EnergyPlannerCoordinator = hass.data[DOMAIN][entry.entry_id]
    await async_setup_switches(hass, entry, coordinator, async_add_entities)
