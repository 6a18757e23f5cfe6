"""Test the config flow."""
from unittest.mock import patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant import config_entries, data_entry_flow
from homeassistant.core import HomeAssistant

from custom_components.energy_planner.const import (
    CONF_DAY_END_HOUR,
    CONF_DAY_START_HOUR,
    CONF_DEFAULT_LEVEL,
    DOMAIN,
)

from .conftest import CONFIG_DATA


@pytest.mark.asyncio
async def test_form_step_user(hass: HomeAssistant, enable_custom_integrations):
    """Test we get the form."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == data_entry_flow.FlowResultType.FORM
    assert result["step_id"] == "user"
    assert result["errors"] == {}


@pytest.mark.asyncio
async def test_complete_config_flow(hass: HomeAssistant, enable_custom_integrations):
    """Submitting the form creates the entry."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(
        "custom_components.energy_planner.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result2 = await hass.config_entries.flow.async_configure(
            result["flow_id"], dict(CONFIG_DATA)
        )
        await hass.async_block_till_done()

    assert result2["type"] == data_entry_flow.FlowResultType.CREATE_ENTRY
    assert result2["title"] == "Energy Planner"
    assert result2["data"] == CONFIG_DATA
    assert len(mock_setup_entry.mock_calls) == 1


@pytest.mark.asyncio
async def test_invalid_window(hass: HomeAssistant, enable_custom_integrations):
    """A window that starts after it ends is rejected."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result2 = await hass.config_entries.flow.async_configure(
        result["flow_id"],
        {**CONFIG_DATA, CONF_DAY_START_HOUR: 20, CONF_DAY_END_HOUR: 8},
    )

    assert result2["type"] == data_entry_flow.FlowResultType.FORM
    assert result2["errors"] == {"base": "invalid_window"}


@pytest.mark.asyncio
async def test_single_instance(hass: HomeAssistant, enable_custom_integrations):
    """Only one planner can be configured."""
    MockConfigEntry(domain=DOMAIN, unique_id=DOMAIN, data=dict(CONFIG_DATA)).add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result["type"] == data_entry_flow.FlowResultType.ABORT
    assert result["reason"] == "already_configured"


@pytest.mark.asyncio
async def test_options_flow(hass: HomeAssistant, setup_integration):
    """Options are saved and override the original data."""
    result = await hass.config_entries.options.async_init(setup_integration.entry_id)
    assert result["type"] == data_entry_flow.FlowResultType.FORM
    assert result["step_id"] == "init"

    result2 = await hass.config_entries.options.async_configure(
        result["flow_id"], {**CONFIG_DATA, CONF_DEFAULT_LEVEL: "high"}
    )
    await hass.async_block_till_done()

    assert result2["type"] == data_entry_flow.FlowResultType.CREATE_ENTRY
    assert setup_integration.options[CONF_DEFAULT_LEVEL] == "high"

    coordinator = hass.data[DOMAIN][setup_integration.entry_id]
    assert coordinator.state.check_in.level.value == "high"
