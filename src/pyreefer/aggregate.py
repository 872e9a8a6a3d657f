"""Summary statistics and alarm events over a historical window."""

from __future__ import annotations

from collections.abc import Sequence

from pyreefer.models.alarm import AlarmEvent, AlarmTier
from pyreefer.models.history import HistoricalSample, SummaryStats
from pyreefer.thermal import classify, describe_tier, in_target_band


def summarize(samples: Sequence[HistoricalSample]) -> SummaryStats:
    """Reduce a time-ordered window to min, max and percent-in-range.

    The window is not sorted.  An empty window gives neutral stats.
    """
    if not samples:
        return SummaryStats()

    temps = [sample.temp_c for sample in samples]
    in_band = sum(1 for temp in temps if in_target_band(temp))
    return SummaryStats(
        min=round(min(temps), 1),
        max=round(max(temps), 1),
        pct_in_range=round(in_band / len(temps) * 100, 1),
        count=len(temps),
    )


def detect_alarm_events(device_id: int, samples: Sequence[HistoricalSample]) -> list[AlarmEvent]:
    """Emit an event each time the alarm tier changes to a non-ok tier.

    A return to ``ok`` closes the episode without an event.
    """
    events: list[AlarmEvent] = []
    previous = AlarmTier.OK
    for sample in samples:
        tier = classify(sample.temp_c)
        if tier != previous and tier != AlarmTier.OK:
            events.append(
                AlarmEvent(
                    device_id=device_id,
                    ts=sample.ts,
                    temp_c=sample.temp_c,
                    tier=tier,
                    door=sample.door,
                    description=describe_tier(tier),
                )
            )
        previous = tier
    return events
