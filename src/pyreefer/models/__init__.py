"""Data models for Traccar records and derived telemetry state."""

from pyreefer.models._base import ApiTimestamp, ReeferBaseModel
from pyreefer.models.alarm import AlarmEvent, AlarmTier, RangeStatus
from pyreefer.models.device import Device
from pyreefer.models.fleet import FleetItem
from pyreefer.models.history import HistoricalSample, SummaryStats
from pyreefer.models.position import Position

__all__ = [
    "AlarmEvent",
    "AlarmTier",
    "ApiTimestamp",
    "Device",
    "FleetItem",
    "HistoricalSample",
    "Position",
    "RangeStatus",
    "ReeferBaseModel",
    "SummaryStats",
]
