"""Internal constants shared across the library."""

USER_AGENT = "pyreefer/1"

DEVICES_ENDPOINT = "/api/devices"
POSITIONS_ENDPOINT = "/api/positions"

# ------------------------------------------------------------------
# Cadence and windows
# ------------------------------------------------------------------

DEFAULT_POLL_INTERVAL_S: float = 30.0
DEFAULT_HISTORY_HOURS: float = 6.0

# ------------------------------------------------------------------
# Target band and alarm thresholds (°C)
# ------------------------------------------------------------------

TARGET_BAND_MIN_C: float = -18.0
TARGET_BAND_MAX_C: float = -7.0

ALARM_GRAVE_C: float = 10.0
ALARM_MEDIO_C: float = -1.0
ALARM_LEVE_C: float = -6.0

# ------------------------------------------------------------------
# Attribute defaults
# ------------------------------------------------------------------

DEFAULT_DOOR: int = 0
DEFAULT_FAN: int = 0
DEFAULT_SETPOINT_C: float = -15.0
