"""Device model."""

from __future__ import annotations

from pyreefer.models._base import ApiTimestamp, ReeferBaseModel


class Device(ReeferBaseModel):
    """A tracked vehicle as returned by ``GET /api/devices``.

    Immutable snapshot of one fetch.
    """

    id: int
    """Numeric device identifier."""
    name: str = ""
    """Human-readable name (usually the licence plate)."""
    unique_id: str = ""
    """Tracker unique identifier (IMEI or similar)."""
    status: str = ""
    """Connection status (``"online"``, ``"offline"``, ``"unknown"``)."""
    last_update: ApiTimestamp = None
    """Last time the server heard from the device."""
    position_id: int | None = None
    group_id: int | None = None
    phone: str | None = None
    model: str | None = None
    contact: str | None = None
    category: str | None = None
    disabled: bool = False

    @property
    def label(self) -> str:
        """Display label: the name, or the unique id when the name is blank."""
        return self.name or self.unique_id
