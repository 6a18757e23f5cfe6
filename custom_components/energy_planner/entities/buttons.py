"""Button entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.button import ButtonEntity
from homeassistant.helpers.entity import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import EnergyPlannerCoordinator

from ..const import DEFAULT_NAME, DOMAIN
from ..models import TemporaryStateType
from ..planner_logging import get_logger


class _PlannerButton(ButtonEntity):
    """Shared setup for the planner's buttons."""

    _attr_has_entity_name = True

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
        key: str,
        name: str,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_{key}"
        self._attr_name = name

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Energy Planner",
        )


class StartTemporaryStateButton(_PlannerButton):
    """Start a session of one type with the default duration."""

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
        state_type: TemporaryStateType,
    ) -> None:
        """Initialize."""
        super().__init__(
            entry_id,
            coordinator,
            key=f"start_{state_type.value}",
            name=f"Start {state_type.value.replace('_', ' ').title()}",
        )
        self._state_type = state_type
        self._attr_icon = (
            "mdi:battery-charging-high"
            if state_type is TemporaryStateType.FAST_CHARGE
            else "mdi:battery-low"
        )

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("START_SESSION_BUTTON_PRESSED", type=self._state_type.value)
        await self._coordinator.start_temporary_state(self._state_type)


class EndTemporaryStateButton(_PlannerButton):
    """End the running session."""

    _attr_icon = "mdi:timer-off-outline"

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
    ) -> None:
        """Initialize."""
        super().__init__(entry_id, coordinator, "end_temporary_state", "End Temporary State")

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("END_SESSION_BUTTON_PRESSED")
        await self._coordinator.end_temporary_state()


async def async_setup_buttons(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: EnergyPlannerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up button entities."""
    async_add_entities([
        StartTemporaryStateButton(entry.entry_id, coordinator, TemporaryStateType.FAST_CHARGE),
        StartTemporaryStateButton(entry.entry_id, coordinator, TemporaryStateType.LOW_POWER),
        EndTemporaryStateButton(entry.entry_id, coordinator),
    ])
