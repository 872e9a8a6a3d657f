"""pyreefer - Async temperature monitoring for refrigerated vehicles on Traccar."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyreefer")
except PackageNotFoundError:
    __version__ = "0+local"
from pyreefer.aggregate import detect_alarm_events, summarize
from pyreefer.client import ReeferClient
from pyreefer.config import ReeferConfig
from pyreefer.exceptions import (
    ReeferConfigError,
    ReeferError,
    ReeferParseError,
    ReeferTransportError,
)
from pyreefer.ingestion.fleet import join
from pyreefer.ingestion.history import samples_from_positions
from pyreefer.models import (
    AlarmEvent,
    AlarmTier,
    Device,
    FleetItem,
    HistoricalSample,
    Position,
    RangeStatus,
    SummaryStats,
)
from pyreefer.scheduler import PollingScheduler
from pyreefer.state.session import FleetPhase, SessionState, View
from pyreefer.state.store import SessionStore
from pyreefer.thermal import classify, describe_tier, in_target_band, range_status

__all__ = [
    "__version__",
    "AlarmEvent",
    "AlarmTier",
    "Device",
    "FleetItem",
    "FleetPhase",
    "HistoricalSample",
    "PollingScheduler",
    "Position",
    "RangeStatus",
    "ReeferClient",
    "ReeferConfig",
    "ReeferConfigError",
    "ReeferError",
    "ReeferParseError",
    "ReeferTransportError",
    "SessionState",
    "SessionStore",
    "SummaryStats",
    "View",
    "classify",
    "describe_tier",
    "detect_alarm_events",
    "in_target_band",
    "join",
    "range_status",
    "samples_from_positions",
    "summarize",
]
