"""Position endpoints.

Endpoints:
  - GET /api/positions                              (latest per device)
  - GET /api/positions?deviceId=&from=&to=          (one device, time window)
"""

from __future__ import annotations

import logging
from datetime import datetime

from pyreefer._api._common import fetch_list
from pyreefer._constants import POSITIONS_ENDPOINT
from pyreefer._transport import Transport
from pyreefer.ingestion.normalize import format_timestamp
from pyreefer.models.position import Position

_logger = logging.getLogger(__name__)


async def fetch_latest_positions(transport: Transport) -> list[Position]:
    """Fetch the latest position of every device."""
    return await fetch_list(endpoint=POSITIONS_ENDPOINT, transport=transport, model=Position)


async def fetch_position_history(
    transport: Transport,
    device_id: int,
    start: datetime,
    end: datetime,
) -> list[Position]:
    """Fetch the positions of *device_id* between *start* and *end*."""
    if end < start:
        raise ValueError(f"window end {end} is before start {start}")
    params = {
        "deviceId": str(device_id),
        "from": format_timestamp(start),
        "to": format_timestamp(end),
    }
    positions = await fetch_list(endpoint=POSITIONS_ENDPOINT, transport=transport, model=Position, params=params)
    _logger.debug("History for device %s: %d positions", device_id, len(positions))
    return positions
