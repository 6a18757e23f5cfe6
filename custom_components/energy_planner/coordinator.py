"""Energy Planner Coordinator - Thin orchestrator for all components.

It:
- Builds the planner state from the config entry
- Wires the clock tick to session expiry
- Registers services and persists state after every write
- Emits events for state changes

It does NOT contain any planning logic; that lives in domain/.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from homeassistant.core import ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import storage
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.dispatcher import async_dispatcher_send

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

from .const import (
    ATTR_DATE,
    ATTR_DURATION_MINUTES,
    ATTR_END_HOUR,
    ATTR_HOUR,
    ATTR_LEVEL,
    ATTR_NOTE,
    ATTR_START_HOUR,
    ATTR_STATE_TYPE,
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
    DEFAULT_SESSION_MINUTES,
    DEFAULT_SESSION_STEP_MINUTES,
    DEFAULT_TICK_SECONDS,
    DOMAIN,
    SERVICE_CLEAR_PLAN,
    SERVICE_END_TEMPORARY_STATE,
    SERVICE_GET_ACTUAL_RECORDS,
    SERVICE_GET_PLANS,
    SERVICE_RECORD_ACTUAL,
    SERVICE_SET_CHECK_IN,
    SERVICE_SET_PLAN,
    SERVICE_SET_PLAN_RANGE,
    SERVICE_START_TEMPORARY_STATE,
    SIGNAL_UPDATE,
    STORAGE_KEY,
    STORAGE_VERSION,
)
from .core.clock import Clock
from .core.events import EnergyEvent, EnergyEventBus
from .core.ha_clock import HomeAssistantClock
from .core.state import EnergyPlannerState
from .domain import InvalidArgument, TemporaryState, group_by_date
from .models import ActualEnergyRecord, EnergyLevel, EnergyPlan, TemporaryStateType
from .planner_logging import get_logger

LEVELS = [level.value for level in EnergyLevel]
STATE_TYPES = [state_type.value for state_type in TemporaryStateType]
HOUR = vol.All(vol.Coerce(int), vol.Range(min=0, max=23))

SET_PLAN_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_DATE): cv.date,
        vol.Required(ATTR_HOUR): HOUR,
        vol.Required(ATTR_LEVEL): vol.In(LEVELS),
    }
)
SET_PLAN_RANGE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_DATE): cv.date,
        vol.Required(ATTR_START_HOUR): HOUR,
        vol.Required(ATTR_END_HOUR): HOUR,
        vol.Required(ATTR_LEVEL): vol.In(LEVELS),
    }
)
CLEAR_PLAN_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_DATE): cv.date,
        vol.Required(ATTR_HOUR): HOUR,
    }
)
START_TEMPORARY_STATE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_STATE_TYPE): vol.In(STATE_TYPES),
        vol.Optional(ATTR_DURATION_MINUTES): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=24 * 60)
        ),
    }
)
RECORD_ACTUAL_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_DATE): cv.date,
        vol.Required(ATTR_HOUR): HOUR,
        vol.Required(ATTR_LEVEL): vol.In(LEVELS),
        vol.Optional(ATTR_NOTE): cv.string,
    }
)
SET_CHECK_IN_SCHEMA = vol.Schema({vol.Required(ATTR_LEVEL): vol.In(LEVELS)})
GET_BY_DATE_SCHEMA = vol.Schema({vol.Optional(ATTR_DATE): cv.date})

SERVICES = (
    SERVICE_SET_PLAN,
    SERVICE_SET_PLAN_RANGE,
    SERVICE_CLEAR_PLAN,
    SERVICE_START_TEMPORARY_STATE,
    SERVICE_END_TEMPORARY_STATE,
    SERVICE_RECORD_ACTUAL,
    SERVICE_SET_CHECK_IN,
    SERVICE_GET_PLANS,
    SERVICE_GET_ACTUAL_RECORDS,
)


@contextmanager
def _as_validation_error() -> Iterator[None]:
    """Surface engine argument errors the way HA expects from services."""
    try:
        yield
    except InvalidArgument as err:
        raise ServiceValidationError(str(err)) from err


def _grouped_response(records: list[EnergyPlan] | list[ActualEnergyRecord]) -> dict[str, Any]:
    """Service response with entries grouped by ISO date."""
    return {
        "dates": {
            day.isoformat(): [record.to_dict() for record in items]
            for day, items in group_by_date(records).items()
        }
    }


class EnergyPlannerCoordinator:
    """Thin orchestrator for Energy Planner.

    The only writer of the planner state. Entities and services call the
    public methods below; each one mutates the state, saves it and emits an
    event so entities refresh.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the coordinator."""
        self.hass = hass
        self.entry = entry
        self.clock = clock or HomeAssistantClock(hass)
        self._listeners = []
        self._logger = get_logger()
        self._last_slot: tuple[Any, int, int] | None = None

        self._logger.info("COORDINATOR_INIT_START")

        self.default_session_duration = timedelta(
            minutes=int(self._get_config(CONF_DEFAULT_SESSION_MINUTES, DEFAULT_SESSION_MINUTES))
        )
        self.tick_seconds = float(self._get_config(CONF_TICK_SECONDS, DEFAULT_TICK_SECONDS))
        self.log_to_file = bool(self._get_config(CONF_LOG_TO_FILE, DEFAULT_LOG_TO_FILE))

        self.state = self._create_state_from_config()
        self.events = EnergyEventBus(hass)
        self._store = storage.Store(hass, STORAGE_VERSION, STORAGE_KEY)

        self._logger.info("COORDINATOR_INIT_COMPLETE")

    def _get_config(self, key: str, default: Any) -> Any:
        """Options override data."""
        return self.entry.options.get(key, self.entry.data.get(key, default))

    def _create_state_from_config(self) -> EnergyPlannerState:
        """Create state object from config entry."""
        return EnergyPlannerState(
            self.clock,
            default_level=self._get_config(CONF_DEFAULT_LEVEL, DEFAULT_LEVEL),
            step_minutes=int(
                self._get_config(CONF_SESSION_STEP_MINUTES, DEFAULT_SESSION_STEP_MINUTES)
            ),
            day_start_hour=int(self._get_config(CONF_DAY_START_HOUR, DEFAULT_DAY_START_HOUR)),
            day_end_hour=int(self._get_config(CONF_DAY_END_HOUR, DEFAULT_DAY_END_HOUR)),
        )

    async def async_init(self) -> None:
        """Initialize async components."""
        self._logger.info("COORDINATOR_ASYNC_INIT_START")

        if self.log_to_file:
            await self.hass.async_add_executor_job(
                self._logger.set_file_logging, True, Path(self.hass.config.path(DOMAIN))
            )

        await self._load_data()

        # A session restored from storage may already be over
        if self.state.session.check_expiration(self.clock.now()) is not None:
            await self._save_data()

        self._listeners.append(self.clock.on_tick(self.tick_seconds, self._handle_tick))
        self._register_services()

        self._logger.info("COORDINATOR_ASYNC_INIT_COMPLETE")

    async def _load_data(self) -> None:
        """Load persisted state from storage."""
        data = await self._store.async_load()
        if not data:
            return
        try:
            self.state.load_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as ex:
            self._logger.error("STORAGE_LOAD_FAILED", error=str(ex))
            self.state = self._create_state_from_config()

    async def _save_data(self) -> None:
        """Save state to storage."""
        await self._store.async_save(self.state.to_dict())
        self._logger.debug("DATA_SAVED")

    def _register_services(self) -> None:
        """Register HA services."""
        register = self.hass.services.async_register
        register(DOMAIN, SERVICE_SET_PLAN, self._handle_set_plan, schema=SET_PLAN_SCHEMA)
        register(
            DOMAIN, SERVICE_SET_PLAN_RANGE, self._handle_set_plan_range,
            schema=SET_PLAN_RANGE_SCHEMA,
        )
        register(DOMAIN, SERVICE_CLEAR_PLAN, self._handle_clear_plan, schema=CLEAR_PLAN_SCHEMA)
        register(
            DOMAIN, SERVICE_START_TEMPORARY_STATE, self._handle_start_temporary_state,
            schema=START_TEMPORARY_STATE_SCHEMA,
        )
        register(
            DOMAIN, SERVICE_END_TEMPORARY_STATE, self._handle_end_temporary_state,
            schema=vol.Schema({}),
        )
        register(
            DOMAIN, SERVICE_RECORD_ACTUAL, self._handle_record_actual,
            schema=RECORD_ACTUAL_SCHEMA,
        )
        register(
            DOMAIN, SERVICE_SET_CHECK_IN, self._handle_set_check_in,
            schema=SET_CHECK_IN_SCHEMA,
        )
        register(
            DOMAIN, SERVICE_GET_PLANS, self._handle_get_plans,
            schema=GET_BY_DATE_SCHEMA, supports_response=SupportsResponse.ONLY,
        )
        register(
            DOMAIN, SERVICE_GET_ACTUAL_RECORDS, self._handle_get_actual_records,
            schema=GET_BY_DATE_SCHEMA, supports_response=SupportsResponse.ONLY,
        )
        self._logger.debug("SERVICES_REGISTERED")

    def async_unload(self) -> None:
        """Unload the coordinator."""
        for remove in self._listeners:
            remove()
        self._listeners.clear()

        for service in SERVICES:
            self.hass.services.async_remove(DOMAIN, service)

        if self._logger.file_logging_enabled:
            self.hass.async_add_executor_job(self._logger.set_file_logging, False)

        self._logger.info("COORDINATOR_UNLOADED")

    # ========== Tick ==========

    async def _handle_tick(self, _now: datetime) -> None:
        """Expire the session and refresh entities when something visible moved."""
        now = self.clock.now()
        expired = self.state.session.check_expiration(now)
        if expired is not None:
            await self._save_data()
            await self.events.emit(
                EnergyEvent.SESSION_EXPIRED,
                type=expired.type.value,
                expires_at=expired.expires_at.isoformat(),
            )
            return

        # Countdown moves every tick; the resolved slot only on minute change
        slot = (now.date(), now.hour, now.minute)
        if self.state.session.is_active(now) or slot != self._last_slot:
            self._last_slot = slot
            self._update_sensors()

    # ========== Check-in ==========

    async def set_check_in(self, level: Any) -> None:
        """Set today's baseline level. Clears the boost flag."""
        with _as_validation_error():
            change = self.state.check_in.set_level(level, self.clock.now())
        if self.state.check_in.boost_active:
            self.state.check_in.set_boost(False, change.changed_at)
        await self._save_data()
        await self.events.emit(EnergyEvent.CHECK_IN_SET, level=change.level.value)

    async def set_focus_mode(self, enabled: bool) -> None:
        """Turn focus mode on or off."""
        self.state.check_in.set_focus_mode(enabled, self.clock.now())
        await self._save_data()
        await self.events.emit(EnergyEvent.FOCUS_MODE_CHANGED, enabled=enabled)

    async def set_boost(self, enabled: bool) -> None:
        """Turn the open-ended boost on or off."""
        self.state.check_in.set_boost(enabled, self.clock.now())
        await self._save_data()
        await self.events.emit(EnergyEvent.BOOST_CHANGED, enabled=enabled)

    # ========== Temporary session ==========

    async def start_temporary_state(
        self,
        state_type: Any,
        duration: timedelta | None = None,
    ) -> TemporaryState:
        """Start a timed override, replacing any running one.

        Without a duration the configured default is used, cut short at
        midnight. A timed session also ends the open-ended boost.
        """
        now = self.clock.now()
        if duration is None:
            duration = self.state.session.default_duration(now, self.default_session_duration)
        with _as_validation_error():
            started = self.state.session.start(state_type, duration, now)
        if self.state.check_in.boost_active:
            self.state.check_in.set_boost(False, now)
        await self._save_data()
        await self.events.emit(
            EnergyEvent.SESSION_STARTED,
            type=started.type.value,
            expires_at=started.expires_at.isoformat(),
        )
        return started

    async def end_temporary_state(self) -> TemporaryState | None:
        """End the running session, if any."""
        ended = self.state.session.end(self.clock.now())
        if ended is not None:
            await self._save_data()
            await self.events.emit(EnergyEvent.SESSION_ENDED, type=ended.type.value)
        return ended

    # ========== Plans and records ==========

    async def set_plan(self, day: Any, hour: int, level: Any) -> list[EnergyPlan]:
        """Plan one hour; unplanned clears it."""
        with _as_validation_error():
            written = self.state.plan_store.upsert_plan(day, hour, level)
        await self._save_data()
        await self.events.emit(EnergyEvent.PLAN_UPDATED, date=str(day), hours=f"{hour}")
        return written

    async def set_plan_range(
        self,
        day: Any,
        start_hour: int,
        end_hour: int,
        level: Any,
    ) -> list[EnergyPlan]:
        """Plan every hour in [start_hour, end_hour]."""
        with _as_validation_error():
            written = self.state.plan_store.upsert_plan_range(day, start_hour, end_hour, level)
        await self._save_data()
        await self.events.emit(
            EnergyEvent.PLAN_UPDATED, date=str(day), hours=f"{start_hour}-{end_hour}"
        )
        return written

    async def clear_plan(self, day: Any, hour: int) -> EnergyPlan | None:
        """Remove the plan at (day, hour)."""
        with _as_validation_error():
            removed = self.state.plan_store.clear_plan(day, hour)
        if removed is not None:
            await self._save_data()
            await self.events.emit(EnergyEvent.PLAN_CLEARED, date=str(day), hour=hour)
        return removed

    async def record_actual(
        self,
        day: Any,
        hour: int,
        level: Any,
        note: str | None = None,
    ) -> ActualEnergyRecord:
        """Log how an hour actually went."""
        with _as_validation_error():
            record = self.state.plan_store.record_actual(day, hour, level, note)
        await self._save_data()
        await self.events.emit(
            EnergyEvent.ACTUAL_RECORDED,
            date=record.date.isoformat(),
            hour=record.hour,
            level=record.level.value,
        )
        return record

    # ========== Service handlers ==========

    async def _handle_set_plan(self, call: ServiceCall) -> None:
        await self.set_plan(call.data[ATTR_DATE], call.data[ATTR_HOUR], call.data[ATTR_LEVEL])

    async def _handle_set_plan_range(self, call: ServiceCall) -> None:
        await self.set_plan_range(
            call.data[ATTR_DATE],
            call.data[ATTR_START_HOUR],
            call.data[ATTR_END_HOUR],
            call.data[ATTR_LEVEL],
        )

    async def _handle_clear_plan(self, call: ServiceCall) -> None:
        await self.clear_plan(call.data[ATTR_DATE], call.data[ATTR_HOUR])

    async def _handle_start_temporary_state(self, call: ServiceCall) -> None:
        minutes = call.data.get(ATTR_DURATION_MINUTES)
        duration = timedelta(minutes=minutes) if minutes is not None else None
        await self.start_temporary_state(call.data[ATTR_STATE_TYPE], duration)

    async def _handle_end_temporary_state(self, call: ServiceCall) -> None:
        await self.end_temporary_state()

    async def _handle_record_actual(self, call: ServiceCall) -> None:
        await self.record_actual(
            call.data[ATTR_DATE],
            call.data[ATTR_HOUR],
            call.data[ATTR_LEVEL],
            call.data.get(ATTR_NOTE),
        )

    async def _handle_set_check_in(self, call: ServiceCall) -> None:
        await self.set_check_in(call.data[ATTR_LEVEL])

    async def _handle_get_plans(self, call: ServiceCall) -> ServiceResponse:
        store = self.state.plan_store
        day = call.data.get(ATTR_DATE)
        plans = store.plans_for_date(day) if day is not None else store.all_plans()
        return _grouped_response(plans)

    async def _handle_get_actual_records(self, call: ServiceCall) -> ServiceResponse:
        store = self.state.plan_store
        day = call.data.get(ATTR_DATE)
        records = (
            store.actual_records_for_date(day) if day is not None
            else store.all_actual_records()
        )
        return _grouped_response(records)

    # ========== Utility ==========

    def _update_sensors(self) -> None:
        """Notify all entities to update."""
        async_dispatcher_send(self.hass, SIGNAL_UPDATE)
