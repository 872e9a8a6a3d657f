"""Position (telemetry sample) model."""

from __future__ import annotations

from datetime import datetime

from pyreefer.models._base import ApiTimestamp, ReeferBaseModel


class Position(ReeferBaseModel):
    """A single telemetry sample as returned by ``GET /api/positions``.

    Sensor values (temperature, door, setpoint, ...) travel in
    :attr:`attributes` under several possible key aliases; see
    :mod:`pyreefer.ingestion.attributes`.
    """

    id: int | None = None
    device_id: int
    """Foreign key to :attr:`pyreefer.models.device.Device.id`."""
    protocol: str | None = None
    fix_time: ApiTimestamp = None
    device_time: ApiTimestamp = None
    server_time: ApiTimestamp = None
    valid: bool | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    speed: float | None = None
    course: float | None = None

    @property
    def timestamp(self) -> datetime | None:
        """Best known sample time: fix, then device, then server time."""
        return self.fix_time or self.device_time or self.server_time
