"""Fixtures for testing."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant

from custom_components.energy_planner.const import (
    CONF_DAY_END_HOUR,
    CONF_DAY_START_HOUR,
    CONF_DEFAULT_LEVEL,
    CONF_DEFAULT_SESSION_MINUTES,
    CONF_LOG_TO_FILE,
    CONF_SESSION_STEP_MINUTES,
    CONF_TICK_SECONDS,
    DOMAIN,
)
from custom_components.energy_planner.core.clock import ManualClock
from custom_components.energy_planner.core.state import EnergyPlannerState

# Monday 2026-10-19 10:00 local time for every HA test (default test zone
# is US/Pacific, UTC-7 in October).
FROZEN_NOW = "2026-10-19 17:00:00+00:00"

CONFIG_DATA = {
    CONF_DEFAULT_LEVEL: "medium",
    CONF_DAY_START_HOUR: 7,
    CONF_DAY_END_HOUR: 23,
    CONF_SESSION_STEP_MINUTES: 15,
    CONF_DEFAULT_SESSION_MINUTES: 120,
    CONF_TICK_SECONDS: 1,
    CONF_LOG_TO_FILE: False,
}

# Engine tests run on a fixed UTC+2 clock so "today" never depends on the host.
ENGINE_TZ = timezone(timedelta(hours=2))


@pytest.fixture
def now():
    """Monday 2026-10-19 10:00 in the engine test zone."""
    return datetime(2026, 10, 19, 10, 0, tzinfo=ENGINE_TZ)


@pytest.fixture
def clock(now):
    """Manual clock starting at now."""
    return ManualClock(now)


@pytest.fixture
def planner(clock):
    """Fresh planner state on the manual clock."""
    return EnergyPlannerState(clock)


@pytest.fixture
def mock_config_entry():
    """Mock a config entry."""
    entry = MagicMock()
    entry.data = dict(CONFIG_DATA)
    entry.options = {}
    entry.entry_id = "test_entry_id"
    return entry


@pytest.fixture
async def setup_integration(hass: HomeAssistant, enable_custom_integrations, freezer):
    """Set up the integration at a fixed time."""
    freezer.move_to(FROZEN_NOW)

    entry = MockConfigEntry(domain=DOMAIN, data=dict(CONFIG_DATA))
    entry.add_to_hass(hass)

    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    return entry
