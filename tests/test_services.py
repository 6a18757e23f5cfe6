"""Test service handlers."""
import pytest
import voluptuous as vol

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ServiceValidationError

from custom_components.energy_planner.const import DOMAIN
from custom_components.energy_planner.models import EnergyLevel

TODAY = "2026-10-19"


def _coordinator(hass, entry):
    return hass.data[DOMAIN][entry.entry_id]


@pytest.mark.asyncio
async def test_set_plan(hass: HomeAssistant, setup_integration):
    """set_plan writes one slot and refreshes the current level."""
    await hass.services.async_call(
        DOMAIN, "set_plan", {"date": TODAY, "hour": 10, "level": "high"}, blocking=True
    )
    await hass.async_block_till_done()

    coordinator = _coordinator(hass, setup_integration)
    plan = coordinator.state.plan_store.plan_for(coordinator.clock.now(), 10)
    assert plan.level is EnergyLevel.HIGH
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "high"


@pytest.mark.asyncio
async def test_set_plan_unplanned_clears(hass: HomeAssistant, setup_integration):
    """Planning an hour as unplanned removes it."""
    for level in ("low", "unplanned"):
        await hass.services.async_call(
            DOMAIN, "set_plan", {"date": TODAY, "hour": 9, "level": level}, blocking=True
        )

    coordinator = _coordinator(hass, setup_integration)
    assert not coordinator.state.plan_store.has_plans(coordinator.clock.now())


@pytest.mark.asyncio
async def test_set_plan_range_and_get_plans(hass: HomeAssistant, setup_integration):
    """Range plans come back grouped by date."""
    await hass.services.async_call(
        DOMAIN,
        "set_plan_range",
        {"date": TODAY, "start_hour": 8, "end_hour": 10, "level": "low"},
        blocking=True,
    )
    await hass.services.async_call(
        DOMAIN, "set_plan", {"date": "2026-10-20", "hour": 7, "level": "high"}, blocking=True
    )

    response = await hass.services.async_call(
        DOMAIN, "get_plans", {}, blocking=True, return_response=True
    )

    assert list(response["dates"]) == [TODAY, "2026-10-20"]
    assert [p["hour"] for p in response["dates"][TODAY]] == [8, 9, 10]
    assert {p["level"] for p in response["dates"][TODAY]} == {"low"}

    response = await hass.services.async_call(
        DOMAIN, "get_plans", {"date": "2026-10-20"}, blocking=True, return_response=True
    )
    assert list(response["dates"]) == ["2026-10-20"]
    assert hass.states.get("sensor.energy_planner_planned_days").state == "2"


@pytest.mark.asyncio
async def test_clear_plan(hass: HomeAssistant, setup_integration):
    """clear_plan removes one slot."""
    await hass.services.async_call(
        DOMAIN, "set_plan", {"date": TODAY, "hour": 10, "level": "low"}, blocking=True
    )
    await hass.services.async_call(
        DOMAIN, "clear_plan", {"date": TODAY, "hour": 10}, blocking=True
    )
    await hass.async_block_till_done()

    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "medium"


@pytest.mark.asyncio
async def test_invalid_range_rejected(hass: HomeAssistant, setup_integration):
    """A reversed range is a validation error and writes nothing."""
    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            DOMAIN,
            "set_plan_range",
            {"date": TODAY, "start_hour": 10, "end_hour": 8, "level": "low"},
            blocking=True,
        )

    coordinator = _coordinator(hass, setup_integration)
    assert coordinator.state.plan_store.all_plans() == []


@pytest.mark.asyncio
async def test_schema_rejects_bad_input(hass: HomeAssistant, setup_integration):
    """Unknown levels and hours out of range never reach the engine."""
    with pytest.raises((vol.Invalid, ServiceValidationError)):
        await hass.services.async_call(
            DOMAIN, "set_plan", {"date": TODAY, "hour": 24, "level": "high"}, blocking=True
        )
    with pytest.raises((vol.Invalid, ServiceValidationError)):
        await hass.services.async_call(
            DOMAIN, "set_check_in", {"level": "sleepy"}, blocking=True
        )


@pytest.mark.asyncio
async def test_start_and_end_temporary_state(hass: HomeAssistant, setup_integration):
    """A session forces its level until it is ended."""
    await hass.services.async_call(
        DOMAIN,
        "start_temporary_state",
        {"state_type": "low_power", "duration_minutes": 30},
        blocking=True,
    )
    await hass.async_block_till_done()

    state = hass.states.get("sensor.energy_planner_temporary_state")
    assert state.state == "low_power"
    assert state.attributes["countdown"] == "30:00"
    assert hass.states.get("sensor.energy_planner_temporary_state_remaining").state == "1800"
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "low"

    await hass.services.async_call(DOMAIN, "end_temporary_state", {}, blocking=True)
    await hass.async_block_till_done()

    assert hass.states.get("sensor.energy_planner_temporary_state").state == "idle"
    assert hass.states.get("sensor.energy_planner_current_energy_level").state == "medium"


@pytest.mark.asyncio
async def test_start_temporary_state_default_duration(hass: HomeAssistant, setup_integration):
    """Without a duration the configured default is used."""
    await hass.services.async_call(
        DOMAIN, "start_temporary_state", {"state_type": "fast_charge"}, blocking=True
    )

    coordinator = _coordinator(hass, setup_integration)
    assert coordinator.state.session.current.duration.total_seconds() == 2 * 3600


@pytest.mark.asyncio
async def test_session_past_midnight_rejected(hass: HomeAssistant, setup_integration):
    """Durations beyond the end of the day are validation errors."""
    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            DOMAIN,
            "start_temporary_state",
            {"state_type": "fast_charge", "duration_minutes": 15 * 60},
            blocking=True,
        )

    coordinator = _coordinator(hass, setup_integration)
    assert coordinator.state.session.current is None


@pytest.mark.asyncio
async def test_record_actual_and_get_records(hass: HomeAssistant, setup_integration):
    """Records are a log and come back grouped by date."""
    for level, note in (("low", None), ("high", "after lunch")):
        data = {"date": TODAY, "hour": 9, "level": level}
        if note:
            data["note"] = note
        await hass.services.async_call(DOMAIN, "record_actual_energy", data, blocking=True)

    response = await hass.services.async_call(
        DOMAIN, "get_actual_records", {"date": TODAY}, blocking=True, return_response=True
    )

    records = response["dates"][TODAY]
    assert [r["level"] for r in records] == ["low", "high"]
    assert records[0]["note"] is None
    assert records[1]["note"] == "after lunch"
    assert hass.states.get("sensor.energy_planner_recorded_days").state == "1"


@pytest.mark.asyncio
async def test_set_check_in_clears_boost(hass: HomeAssistant, setup_integration):
    """An explicit check-in ends the boost."""
    coordinator = _coordinator(hass, setup_integration)
    await coordinator.set_boost(True)

    await hass.services.async_call(DOMAIN, "set_check_in", {"level": "low"}, blocking=True)
    await hass.async_block_till_done()

    assert not coordinator.state.check_in.boost_active
    assert hass.states.get("sensor.energy_planner_check_in_level").state == "low"
    assert hass.states.get("switch.energy_planner_energy_boost").state == "off"
