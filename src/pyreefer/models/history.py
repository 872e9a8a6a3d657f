"""Historical sample and summary statistics models."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class HistoricalSample(BaseModel):
    """One accepted reading of a vehicle's trailing window."""

    model_config = ConfigDict(frozen=True)

    ts: datetime
    temp_c: float
    door: int = 0
    fan: int = 0

    @field_validator("temp_c")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("temp_c must be a finite number")
        return value


class SummaryStats(BaseModel):
    """Summary of a historical window.

    ``min`` and ``max`` are ``None`` and ``pct_in_range`` is ``0.0``
    for an empty window.
    """

    model_config = ConfigDict(frozen=True)

    min: float | None = None
    max: float | None = None
    pct_in_range: float = 0.0
    count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.count == 0
