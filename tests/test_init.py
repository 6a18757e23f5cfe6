"""Test integration setup and teardown."""
import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant

from custom_components.energy_planner.const import DOMAIN, STORAGE_KEY, STORAGE_VERSION

from .conftest import CONFIG_DATA, FROZEN_NOW


def _stored(data):
    return {"version": STORAGE_VERSION, "minor_version": 1, "key": STORAGE_KEY, "data": data}


@pytest.mark.asyncio
async def test_setup_entry(hass: HomeAssistant, setup_integration):
    """Test integration sets up correctly."""
    assert setup_integration.state == ConfigEntryState.LOADED
    assert setup_integration.entry_id in hass.data[DOMAIN]
    assert hass.services.has_service(DOMAIN, "set_plan")


@pytest.mark.asyncio
async def test_unload_entry(hass: HomeAssistant, setup_integration):
    """Test integration unloads correctly and removes its services."""
    assert await hass.config_entries.async_unload(setup_integration.entry_id)
    await hass.async_block_till_done()

    assert setup_integration.state == ConfigEntryState.NOT_LOADED
    assert not hass.services.has_service(DOMAIN, "set_plan")
    assert setup_integration.entry_id not in hass.data[DOMAIN]


@pytest.mark.asyncio
async def test_state_restored_from_storage(
    hass: HomeAssistant, hass_storage, enable_custom_integrations, freezer
):
    """Plans and check-in come back after a restart; an old session does not."""
    freezer.move_to(FROZEN_NOW)
    hass_storage[STORAGE_KEY] = _stored(
        {
            "plan_store": {
                "plans": [
                    {
                        "id": "p1",
                        "date": "2026-10-19",
                        "hour": 10,
                        "level": "low",
                        "created_at": "2026-10-18T20:00:00-07:00",
                    }
                ],
                "actual_records": [],
            },
            "session": {
                "current": {
                    "type": "fast_charge",
                    "started_at": "2026-10-19T06:00:00-07:00",
                    "duration_seconds": 3600,
                }
            },
            "check_in": {
                "level": "high",
                "focus_mode_on": False,
                "boost_active": False,
                "history": [],
            },
        }
    )

    entry = MockConfigEntry(domain=DOMAIN, data=dict(CONFIG_DATA))
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    coordinator = hass.data[DOMAIN][entry.entry_id]
    assert coordinator.state.check_in.level.value == "high"
    assert coordinator.state.session.current is None
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "low"
    assert hass.states.get("sensor.energy_planner_temporary_state").state == "idle"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"plan_store": {"plans": [{"date": "not a date"}]}},
        {"plan_store": [{"id": "p1"}]},
    ],
)
async def test_corrupt_storage_starts_fresh(
    hass: HomeAssistant, hass_storage, enable_custom_integrations, freezer, payload
):
    """Unreadable stored data is ignored."""
    freezer.move_to(FROZEN_NOW)
    hass_storage[STORAGE_KEY] = _stored(payload)

    entry = MockConfigEntry(domain=DOMAIN, data=dict(CONFIG_DATA))
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    coordinator = hass.data[DOMAIN][entry.entry_id]
    assert entry.state == ConfigEntryState.LOADED
    assert coordinator.state.plan_store.all_plans() == []
