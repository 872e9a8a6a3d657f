"""High-level async client for the Traccar telemetry API."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import aiohttp

from pyreefer._api.devices import fetch_devices
from pyreefer._api.positions import fetch_latest_positions, fetch_position_history
from pyreefer._transport import HttpTransport
from pyreefer.config import ReeferConfig
from pyreefer.exceptions import ReeferError
from pyreefer.ingestion.fleet import join
from pyreefer.ingestion.history import samples_from_positions
from pyreefer.models.device import Device
from pyreefer.models.fleet import FleetItem
from pyreefer.models.history import HistoricalSample
from pyreefer.models.position import Position

_logger = logging.getLogger(__name__)


class ReeferClient:
    """Async client for the Traccar telemetry API.

    Usage::

        async with ReeferClient(config) as client:
            fleet = await client.get_fleet()
            samples = await client.get_history_samples(fleet[0].id)
    """

    def __init__(
        self,
        config: ReeferConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    @property
    def config(self) -> ReeferConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ReeferClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise ReeferError("Client not initialized. Use 'async with ReeferClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Raw feeds
    # ------------------------------------------------------------------

    async def get_devices(self) -> list[Device]:
        return await fetch_devices(self._require_transport())

    async def get_positions(self) -> list[Position]:
        """Latest position of every device."""
        return await fetch_latest_positions(self._require_transport())

    async def get_position_history(
        self,
        device_id: int,
        *,
        hours: float | None = None,
        now: datetime | None = None,
    ) -> list[Position]:
        """Positions of one device over the trailing window (default ``config.history_hours``)."""
        end = now or datetime.now(UTC)
        start = end - timedelta(hours=hours if hours is not None else self._config.history_hours)
        return await fetch_position_history(self._require_transport(), device_id, start, end)

    # ------------------------------------------------------------------
    # Derived records
    # ------------------------------------------------------------------

    async def get_fleet(self) -> tuple[FleetItem, ...]:
        """Fetch devices and positions concurrently and join them.

        Nothing is returned unless both fetches succeed.
        """
        transport = self._require_transport()
        devices, positions = await asyncio.gather(
            fetch_devices(transport),
            fetch_latest_positions(transport),
        )
        _logger.debug("Fleet fetch: %d devices, %d positions", len(devices), len(positions))
        return join(devices, positions)

    async def get_history_samples(
        self,
        device_id: int,
        *,
        hours: float | None = None,
        now: datetime | None = None,
    ) -> list[HistoricalSample]:
        """Accepted historical samples of one device over the trailing window."""
        positions = await self.get_position_history(device_id, hours=hours, now=now)
        return samples_from_positions(positions)
