"""Alarm tier, range status and alarm event models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class AlarmTier(StrEnum):
    """Severity classification of a temperature reading."""

    OK = "ok"
    LEVE = "leve"
    MEDIO = "medio"
    GRAVE = "grave"


class RangeStatus(StrEnum):
    """Position of a reading relative to the target band."""

    BELOW = "abaixo_da_faixa"
    IN_RANGE = "na_faixa"
    ABOVE = "acima_da_faixa"


class AlarmEvent(BaseModel):
    """A tier change into a non-ok tier, derived from a historical window."""

    model_config = ConfigDict(frozen=True)

    device_id: int
    ts: datetime
    temp_c: float
    tier: AlarmTier
    door: int = 0
    description: str = ""
