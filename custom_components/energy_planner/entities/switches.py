"""Switch entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.components.switch import SwitchEntity
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import EnergyPlannerCoordinator
    from ..core.state import EnergyPlannerState

from ..const import DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE


@dataclass
class SwitchDefinition:
    """Definition for a switch entity."""

    key: str
    name: str
    is_on_fn: Callable[[EnergyPlannerState], bool]
    set_fn: Callable[[EnergyPlannerCoordinator, bool], Awaitable[None]]
    icon: str | None = None


SWITCH_DEFINITIONS: list[SwitchDefinition] = [
    SwitchDefinition(
        key="focus_mode",
        name="Focus Mode",
        is_on_fn=lambda s: s.check_in.focus_mode_on,
        set_fn=lambda c, enabled: c.set_focus_mode(enabled),
        icon="mdi:target",
    ),
    SwitchDefinition(
        key="energy_boost",
        name="Energy Boost",
        is_on_fn=lambda s: s.check_in.boost_active,
        set_fn=lambda c, enabled: c.set_boost(enabled),
        icon="mdi:rocket-launch",
    ),
]


class EnergyPlannerSwitch(SwitchEntity):
    """Switch backed by a check-in toggle."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
        definition: SwitchDefinition,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._definition = definition

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Energy Planner",
        )

    @property
    def is_on(self) -> bool:
        """Return the toggle's current value."""
        return self._definition.is_on_fn(self._coordinator.state)

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )

    @callback
    def _handle_update(self) -> None:
        self.async_write_ha_state()

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn on."""
        await self._definition.set_fn(self._coordinator, True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off."""
        await self._definition.set_fn(self._coordinator, False)


async def async_setup_switches(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: EnergyPlannerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switch entities."""
    async_add_entities([
        EnergyPlannerSwitch(entry.entry_id, coordinator, definition)
        for definition in SWITCH_DEFINITIONS
    ])
