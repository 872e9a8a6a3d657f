"""Device list endpoint.

Endpoint:
  - GET /api/devices
"""

from __future__ import annotations

from pyreefer._api._common import fetch_list
from pyreefer._constants import DEVICES_ENDPOINT
from pyreefer._transport import Transport
from pyreefer.models.device import Device


async def fetch_devices(transport: Transport) -> list[Device]:
    """Fetch every device visible to the token."""
    return await fetch_list(endpoint=DEVICES_ENDPOINT, transport=transport, model=Device)
