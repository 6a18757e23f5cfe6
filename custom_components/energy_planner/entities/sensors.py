"""Sensor entities using factory pattern.

Instead of defining each sensor manually, we use a data-driven approach.
Add a new sensor = add one entry to SENSOR_DEFINITIONS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import UnitOfTime
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
from ..domain.session import SessionState, format_countdown
from ..domain.summary import describe_totals
from ..models import EnergyLevel, TemporaryStateType

LEVEL_OPTIONS = [level.value for level in EnergyLevel]
TEMPORARY_STATE_OPTIONS = [SessionState.IDLE.value] + [t.value for t in TemporaryStateType]


@dataclass
class SensorDefinition:
    """Definition for a sensor entity."""

    key: str  # Unique identifier
    name: str  # Display name
    value_fn: Callable[[EnergyPlannerState], Any]
    attributes_fn: Callable[[EnergyPlannerState], dict[str, Any]] | None = None
    unit: str | None = None
    device_class: SensorDeviceClass | None = None
    state_class: SensorStateClass | None = None
    options: list[str] | None = None
    icon: str | None = None


def _current_level(s: EnergyPlannerState) -> str:
    return s.resolver.resolve_now().level.value


def _current_level_attributes(s: EnergyPlannerState) -> dict[str, Any]:
    now = s.clock.now()
    resolution = s.resolver.resolve_now()
    return {"source": resolution.source.name.lower(), "hour": now.hour}


def _temporary_state(s: EnergyPlannerState) -> str:
    if s.session.is_active(s.clock.now()):
        return s.session.current.type.value
    return SessionState.IDLE.value


def _temporary_state_attributes(s: EnergyPlannerState) -> dict[str, Any]:
    now = s.clock.now()
    current = s.session.current
    if current is None or not s.session.is_active(now):
        return {}
    return {
        "started_at": current.started_at.isoformat(),
        "expires_at": current.expires_at.isoformat(),
        "countdown": format_countdown(s.session.remaining_time(now)),
    }


def _elapsed_attributes(s: EnergyPlannerState) -> dict[str, Any]:
    totals = s.summary.elapsed_summary()
    return {f"{level.value}_minutes": minutes for level, minutes in totals.items()}


def _plan_attributes(s: EnergyPlannerState) -> dict[str, Any]:
    totals = s.summary.plan_summary(s.clock.now().date())
    return {f"{level.value}_hours": hours for level, hours in totals.items()}


# All sensor definitions in one place
SENSOR_DEFINITIONS: list[SensorDefinition] = [
    # Resolved state
    SensorDefinition(
        key="current_energy_level",
        name="Current Energy Level",
        value_fn=_current_level,
        attributes_fn=_current_level_attributes,
        device_class=SensorDeviceClass.ENUM,
        options=LEVEL_OPTIONS,
        icon="mdi:lightning-bolt",
    ),
    SensorDefinition(
        key="check_in_level",
        name="Check-in Level",
        value_fn=lambda s: s.check_in.level.value,
        device_class=SensorDeviceClass.ENUM,
        options=LEVEL_OPTIONS,
        icon="mdi:clipboard-check-outline",
    ),

    # Temporary session
    SensorDefinition(
        key="temporary_state",
        name="Temporary State",
        value_fn=_temporary_state,
        attributes_fn=_temporary_state_attributes,
        device_class=SensorDeviceClass.ENUM,
        options=TEMPORARY_STATE_OPTIONS,
        icon="mdi:timer-outline",
    ),
    SensorDefinition(
        key="temporary_state_remaining",
        name="Temporary State Remaining",
        value_fn=lambda s: int(s.session.remaining_time(s.clock.now()).total_seconds()),
        unit=UnitOfTime.SECONDS,
        device_class=SensorDeviceClass.DURATION,
        state_class=SensorStateClass.MEASUREMENT,
    ),

    # Day summaries
    SensorDefinition(
        key="today_energy_summary",
        name="Today Energy Summary",
        value_fn=lambda s: describe_totals(s.summary.elapsed_summary()),
        attributes_fn=_elapsed_attributes,
        icon="mdi:chart-timeline-variant",
    ),
    SensorDefinition(
        key="today_plan_summary",
        name="Today Plan Summary",
        value_fn=lambda s: describe_totals(
            s.summary.plan_summary(s.clock.now().date()), unit="hours"
        ),
        attributes_fn=_plan_attributes,
        icon="mdi:calendar-clock",
    ),

    # History
    SensorDefinition(
        key="planned_days",
        name="Planned Days",
        value_fn=lambda s: len(s.plan_store.planned_dates()),
        attributes_fn=lambda s: {
            "dates": [day.isoformat() for day in s.plan_store.planned_dates()]
        },
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:calendar-arrow-right",
    ),
    SensorDefinition(
        key="recorded_days",
        name="Recorded Days",
        value_fn=lambda s: len(s.plan_store.recorded_dates()),
        attributes_fn=lambda s: {
            "dates": [day.isoformat() for day in s.plan_store.recorded_dates()]
        },
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:calendar-check",
    ),
]


class EnergyPlannerSensor(SensorEntity):
    """Generic Energy Planner sensor entity."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        coordinator: EnergyPlannerCoordinator,
        definition: SensorDefinition,
    ) -> None:
        """Initialize the sensor."""
        self._coordinator = coordinator
        self._definition = definition

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
        self._attr_state_class = definition.state_class
        self._attr_options = definition.options
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Energy Planner",
        )

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        state = self._coordinator.state
        self._attr_native_value = self._definition.value_fn(state)
        if self._definition.attributes_fn is not None:
            self._attr_extra_state_attributes = self._definition.attributes_fn(state)
        self.async_write_ha_state()


async def async_setup_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: EnergyPlannerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up all sensor entities."""
    entities = [
        EnergyPlannerSensor(entry.entry_id, coordinator, definition)
        for definition in SENSOR_DEFINITIONS
    ]
    async_add_entities(entities)
