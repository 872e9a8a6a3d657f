"""Normalise a position history feed into historical samples."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pyreefer._constants import DEFAULT_DOOR, DEFAULT_FAN
from pyreefer.ingestion.attributes import DOOR, FAN, HISTORY_TEMPERATURE, resolve_first_present
from pyreefer.models.history import HistoricalSample
from pyreefer.models.position import Position

_logger = logging.getLogger(__name__)


def sample_from_position(position: Position) -> HistoricalSample | None:
    """Convert one position; ``None`` when it has no usable temperature or time."""
    attrs = position.attributes
    temp_c = resolve_first_present(HISTORY_TEMPERATURE, position=attrs)
    ts = position.timestamp
    if temp_c is None or ts is None:
        return None
    door = resolve_first_present(DOOR, position=attrs)
    fan = resolve_first_present(FAN, position=attrs)
    return HistoricalSample(
        ts=ts,
        temp_c=temp_c,
        door=DEFAULT_DOOR if door is None else door,
        fan=DEFAULT_FAN if fan is None else fan,
    )


def samples_from_positions(positions: Iterable[Position]) -> list[HistoricalSample]:
    """Build the accepted sample list, in feed order.

    Samples whose temperature does not parse to a finite number are
    dropped rather than zeroed so they cannot skew the aggregates.
    """
    samples: list[HistoricalSample] = []
    dropped = 0
    for position in positions:
        sample = sample_from_position(position)
        if sample is None:
            dropped += 1
            continue
        samples.append(sample)
    if dropped:
        _logger.debug("Dropped %d of %d history samples without a usable temperature", dropped, dropped + len(samples))
    return samples
