"""Config flow for Energy Planner integration."""
from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
    CONF_DAY_END_HOUR,
    CONF_DAY_START_HOUR,
    CONF_DEFAULT_LEVEL,
    CONF_DEFAULT_SESSION_MINUTES,
    CONF_LOG_TO_FILE,
    CONF_SESSION_STEP_MINUTES,
    CONF_TICK_SECONDS,
    DEFAULT_DAY_END_HOUR,
    DEFAULT_DAY_START_HOUR,
    DEFAULT_LEVEL,
    DEFAULT_LOG_TO_FILE,
    DEFAULT_NAME,
    DEFAULT_SESSION_MINUTES,
    DEFAULT_SESSION_STEP_MINUTES,
    DEFAULT_TICK_SECONDS,
    DOMAIN,
)
from .models import EnergyLevel


def _hour_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=0,
            max=23,
            step=1,
            mode=selector.NumberSelectorMode.BOX,
        )
    )


def _build_schema(get_value) -> vol.Schema:
    """Schema shared by the user step and the options flow."""
    return vol.Schema(
        {
            vol.Required(
                CONF_DEFAULT_LEVEL,
                default=get_value(CONF_DEFAULT_LEVEL, DEFAULT_LEVEL),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[level.value for level in EnergyLevel],
                    mode=selector.SelectSelectorMode.DROPDOWN,
                )
            ),
            vol.Required(
                CONF_DAY_START_HOUR,
                default=get_value(CONF_DAY_START_HOUR, DEFAULT_DAY_START_HOUR),
            ): _hour_selector(),
            vol.Required(
                CONF_DAY_END_HOUR,
                default=get_value(CONF_DAY_END_HOUR, DEFAULT_DAY_END_HOUR),
            ): _hour_selector(),
            vol.Required(
                CONF_SESSION_STEP_MINUTES,
                default=get_value(CONF_SESSION_STEP_MINUTES, DEFAULT_SESSION_STEP_MINUTES),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    min=1,
                    max=60,
                    step=1,
                    unit_of_measurement="min",
                    mode=selector.NumberSelectorMode.BOX,
                )
            ),
            vol.Required(
                CONF_DEFAULT_SESSION_MINUTES,
                default=get_value(CONF_DEFAULT_SESSION_MINUTES, DEFAULT_SESSION_MINUTES),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    min=15,
                    max=720,
                    step=15,
                    unit_of_measurement="min",
                    mode=selector.NumberSelectorMode.SLIDER,
                )
            ),
            vol.Required(
                CONF_TICK_SECONDS,
                default=get_value(CONF_TICK_SECONDS, DEFAULT_TICK_SECONDS),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    min=1,
                    max=60,
                    step=1,
                    unit_of_measurement="s",
                    mode=selector.NumberSelectorMode.BOX,
                )
            ),
            vol.Optional(
                CONF_LOG_TO_FILE,
                default=get_value(CONF_LOG_TO_FILE, DEFAULT_LOG_TO_FILE),
            ): selector.BooleanSelector(),
        }
    )


def _validate(user_input: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if int(user_input[CONF_DAY_START_HOUR]) > int(user_input[CONF_DAY_END_HOUR]):
        errors["base"] = "invalid_window"
    return errors


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Energy Planner."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Single step: planner defaults."""
        errors: dict[str, str] = {}

        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                return self.async_create_entry(title=DEFAULT_NAME, data=user_input)

        return self.async_show_form(
            step_id="user",
            data_schema=_build_schema(lambda key, default: default),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for Energy Planner."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry

    def _get_value(self, key: str, default: Any) -> Any:
        """Get value from options or data with fallback to default."""
        return self._config_entry.options.get(
            key,
            self._config_entry.data.get(key, default)
        )

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options - single page."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                return self.async_create_entry(title="", data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=_build_schema(self._get_value),
            errors=errors,
        )
