"""Test button entities."""
import pytest
from homeassistant.core import HomeAssistant

from custom_components.energy_planner.const import DOMAIN

BUTTONS = [
    "button.energy_planner_start_fast_charge",
    "button.energy_planner_start_low_power",
    "button.energy_planner_end_temporary_state",
]


async def _press(hass: HomeAssistant, entity_id: str) -> None:
    await hass.services.async_call(
        "button",
        "press",
        {"entity_id": entity_id},
        blocking=True,
    )
    await hass.async_block_till_done()


@pytest.mark.asyncio
async def test_buttons_created(hass: HomeAssistant, setup_integration):
    """Test all buttons are created."""
    for entity_id in BUTTONS:
        assert hass.states.get(entity_id) is not None, f"{entity_id} not created"


@pytest.mark.asyncio
async def test_start_fast_charge(hass: HomeAssistant, setup_integration):
    """Pressing start fast charge runs a default-length session."""
    await _press(hass, "button.energy_planner_start_fast_charge")

    state = hass.states.get("sensor.energy_planner_temporary_state")
    assert state.state == "fast_charge"
    assert state.attributes["countdown"] == "2:00:00"
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "high"


@pytest.mark.asyncio
async def test_low_power_replaces_fast_charge(hass: HomeAssistant, setup_integration):
    """Starting another session replaces the running one."""
    await _press(hass, "button.energy_planner_start_fast_charge")
    await _press(hass, "button.energy_planner_start_low_power")

    coordinator = hass.data[DOMAIN][setup_integration.entry_id]
    assert coordinator.state.session.current.type.value == "low_power"
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "low"


@pytest.mark.asyncio
async def test_end_button(hass: HomeAssistant, setup_integration):
    """Ending works with and without a running session."""
    await _press(hass, "button.energy_planner_end_temporary_state")
    await _press(hass, "button.energy_planner_start_low_power")
    await _press(hass, "button.energy_planner_end_temporary_state")

    assert hass.states.get("sensor.energy_planner_temporary_state").state == "idle"
