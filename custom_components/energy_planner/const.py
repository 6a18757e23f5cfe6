"""Constants for the Energy Planner integration."""

DOMAIN = "energy_planner"

# Configuration Keys
CONF_DEFAULT_LEVEL = "default_check_in_level"
CONF_DAY_START_HOUR = "day_start_hour"
CONF_DAY_END_HOUR = "day_end_hour"
CONF_SESSION_STEP_MINUTES = "session_step_minutes"
CONF_DEFAULT_SESSION_MINUTES = "default_session_minutes"
CONF_TICK_SECONDS = "tick_interval_seconds"
CONF_LOG_TO_FILE = "log_to_file"

# Defaults
DEFAULT_NAME = "Energy Planner"
DEFAULT_LEVEL = "medium"
DEFAULT_DAY_START_HOUR = 7
DEFAULT_DAY_END_HOUR = 23
DEFAULT_SESSION_STEP_MINUTES = 15
DEFAULT_SESSION_MINUTES = 120
DEFAULT_TICK_SECONDS = 1
DEFAULT_LOG_TO_FILE = False

# Storage
STORAGE_KEY = f"{DOMAIN}.storage"
STORAGE_VERSION = 1

# Dispatcher signal for entity refresh
SIGNAL_UPDATE = f"{DOMAIN}_update"

# Services
SERVICE_SET_PLAN = "set_plan"
SERVICE_SET_PLAN_RANGE = "set_plan_range"
SERVICE_CLEAR_PLAN = "clear_plan"
SERVICE_START_TEMPORARY_STATE = "start_temporary_state"
SERVICE_END_TEMPORARY_STATE = "end_temporary_state"
SERVICE_RECORD_ACTUAL = "record_actual_energy"
SERVICE_SET_CHECK_IN = "set_check_in"
SERVICE_GET_PLANS = "get_plans"
SERVICE_GET_ACTUAL_RECORDS = "get_actual_records"

# Service fields
ATTR_DATE = "date"
ATTR_HOUR = "hour"
ATTR_START_HOUR = "start_hour"
ATTR_END_HOUR = "end_hour"
ATTR_LEVEL = "level"
ATTR_NOTE = "note"
ATTR_STATE_TYPE = "state_type"
ATTR_DURATION_MINUTES = "duration_minutes"
