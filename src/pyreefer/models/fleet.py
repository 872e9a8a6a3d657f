"""Fleet record model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FleetItem(BaseModel):
    """Normalized per-device state produced by the telemetry join.

    Parameters
    ----------
    id : int
        Device identifier.
    label : str
        Display label (device name or unique id).
    last_seen : datetime or None
        Time of the position used, or the device's last update when
        it has no position.
    temp_c : float or None
        Temperature in °C. ``None`` means *unresolved*; it is never
        coerced to ``0`` since 0 °C is a real (and dangerous) reading.
    door : int
        ``1`` when the cargo door is open, ``0`` otherwise.
    setpoint : float
        Configured target temperature in °C.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    last_seen: datetime | None = None
    temp_c: float | None = None
    door: int = 0
    setpoint: float

    @property
    def has_temperature(self) -> bool:
        return self.temp_c is not None
