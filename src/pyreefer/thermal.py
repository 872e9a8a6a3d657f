"""Alarm tier and target-band classification of temperature readings.

The alarm tier and the range status use different thresholds and
neither is derived from the other.
"""

from __future__ import annotations

import math

from pyreefer._constants import (
    ALARM_GRAVE_C,
    ALARM_LEVE_C,
    ALARM_MEDIO_C,
    TARGET_BAND_MAX_C,
    TARGET_BAND_MIN_C,
)
from pyreefer.models.alarm import AlarmTier, RangeStatus

_TIER_DESCRIPTIONS: dict[AlarmTier, str] = {
    AlarmTier.OK: "Dentro do limite",
    AlarmTier.LEVE: "Acima de -6 °C",
    AlarmTier.MEDIO: "Acima de -1 °C",
    AlarmTier.GRAVE: "Temperatura perigosa (≥ +10 °C)",
}


def _require_finite(temp_c: float) -> float:
    value = float(temp_c)
    if not math.isfinite(value):
        raise ValueError(f"temperature must be a finite number, got {temp_c!r}")
    return value


def classify(temp_c: float) -> AlarmTier:
    """Map a temperature in °C to its alarm tier.

    Thresholds are inclusive on the lower side and checked from the
    most severe down: ``>= 10`` grave, ``>= -1`` medio, ``>= -6`` leve,
    anything colder is ok.

    Raises :class:`ValueError` for NaN or infinite input.
    """
    value = _require_finite(temp_c)
    if value >= ALARM_GRAVE_C:
        return AlarmTier.GRAVE
    if value >= ALARM_MEDIO_C:
        return AlarmTier.MEDIO
    if value >= ALARM_LEVE_C:
        return AlarmTier.LEVE
    return AlarmTier.OK


def in_target_band(temp_c: float) -> bool:
    """Return ``True`` when *temp_c* lies in [-18, -7] °C, both ends included."""
    return TARGET_BAND_MIN_C <= temp_c <= TARGET_BAND_MAX_C


def range_status(temp_c: float) -> RangeStatus:
    """Map a temperature in °C to its target-band compliance state."""
    value = _require_finite(temp_c)
    if value < TARGET_BAND_MIN_C:
        return RangeStatus.BELOW
    if value <= TARGET_BAND_MAX_C:
        return RangeStatus.IN_RANGE
    return RangeStatus.ABOVE


def describe_tier(tier: AlarmTier) -> str:
    """Human-readable description of an alarm tier."""
    return _TIER_DESCRIPTIONS[tier]
