"""Join devices with their latest position into fleet records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from pyreefer._constants import DEFAULT_DOOR, DEFAULT_SETPOINT_C
from pyreefer.ingestion.attributes import DOOR, FLEET_TEMPERATURE, SETPOINT, resolve_first_present
from pyreefer.models.device import Device
from pyreefer.models.fleet import FleetItem
from pyreefer.models.position import Position

_logger = logging.getLogger(__name__)


def is_time_ordered(positions: Sequence[Position]) -> bool:
    """Return ``True`` when every device's positions appear in non-decreasing time order.

    Positions without a timestamp are ignored.
    """
    last_seen: dict[int, datetime] = {}
    for position in positions:
        ts = position.timestamp
        if ts is None:
            continue
        previous = last_seen.get(position.device_id)
        if previous is not None and ts < previous:
            return False
        last_seen[position.device_id] = ts
    return True


def latest_positions(positions: Iterable[Position]) -> dict[int, Position]:
    """Map each device id to its current position.

    The last position in feed order wins.  When the feed is not
    time-ordered, "current" therefore means "last in the array"; the
    positions are not re-sorted.
    """
    latest: dict[int, Position] = {}
    for position in positions:
        latest[position.device_id] = position
    return latest


def _fleet_item(device: Device, position: Position | None) -> FleetItem:
    device_attrs = device.attributes
    if position is None:
        # Without a position the device's own attributes are the only source.
        position_attrs = device_attrs
        last_seen = device.last_update
    else:
        position_attrs = position.attributes
        last_seen = position.timestamp or device.last_update

    temp_c = resolve_first_present(FLEET_TEMPERATURE, position=position_attrs, device=device_attrs)
    door = resolve_first_present(DOOR, position=position_attrs, device=device_attrs)
    setpoint = resolve_first_present(SETPOINT, position=position_attrs, device=device_attrs)

    return FleetItem(
        id=device.id,
        label=device.label,
        last_seen=last_seen,
        temp_c=temp_c,
        door=DEFAULT_DOOR if door is None else door,
        setpoint=DEFAULT_SETPOINT_C if setpoint is None else setpoint,
    )


def join(devices: Sequence[Device], positions: Sequence[Position]) -> tuple[FleetItem, ...]:
    """Combine *devices* with their latest position.

    Emits one :class:`FleetItem` per device, in device order.  Missing or
    malformed attribute values never raise.
    """
    if not is_time_ordered(positions):
        _logger.warning("Position feed is not time-ordered; using the last position per device in feed order")

    latest = latest_positions(positions)
    items = tuple(_fleet_item(device, latest.get(device.id)) for device in devices)

    unresolved = sum(1 for item in items if item.temp_c is None)
    if unresolved:
        _logger.debug("Joined %d devices, %d without a resolvable temperature", len(items), unresolved)
    return items
