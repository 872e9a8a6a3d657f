from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from pyreefer.exceptions import ReeferTransportError
from pyreefer.models.fleet import FleetItem
from pyreefer.models.history import HistoricalSample
from pyreefer.scheduler import PollingScheduler
from pyreefer.state.session import FleetPhase, View

_T0 = datetime(2026, 1, 1, tzinfo=UTC)
_NEVER = 3600.0


def _fleet(*ids: int) -> list[FleetItem]:
    return [FleetItem(id=i, label=f"V{i}", temp_c=-12.0, setpoint=-15.0) for i in ids]


def _samples(*temps: float) -> list[HistoricalSample]:
    return [HistoricalSample(ts=_T0 + timedelta(minutes=30 * i), temp_c=t) for i, t in enumerate(temps)]


@dataclass
class FakeSource:
    fleet_results: list[Sequence[FleetItem] | Exception] = field(default_factory=lambda: [_fleet(101, 102)])
    history_results: dict[int, Sequence[HistoricalSample] | Exception] = field(default_factory=dict)
    fleet_calls: int = 0
    history_calls: list[int] = field(default_factory=list)
    fleet_gate: asyncio.Event | None = None

    async def get_fleet(self) -> Sequence[FleetItem]:
        self.fleet_calls += 1
        if self.fleet_gate is not None:
            await self.fleet_gate.wait()
        result = self.fleet_results[min(self.fleet_calls, len(self.fleet_results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result

    async def get_history_samples(self, device_id: int) -> Sequence[HistoricalSample]:
        self.history_calls.append(device_id)
        result = self.history_results.get(device_id, [])
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.asyncio
async def test_first_fleet_fetch_publishes_snapshot_and_selects_first_device() -> None:
    source = FakeSource()
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()

        state = scheduler.state
        assert state.phase == FleetPhase.IDLE
        assert [item.id for item in state.fleet] == [101, 102]
        assert state.selected_device_id == 101
        assert not scheduler.history_running

    assert not scheduler.running


@pytest.mark.asyncio
async def test_first_fleet_failure_surfaces_error_state() -> None:
    source = FakeSource(fleet_results=[ReeferTransportError("HTTP 503 from /api/devices", status_code=503)])
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()

        assert scheduler.state.phase == FleetPhase.ERROR
        assert "503" in (scheduler.state.error or "")
        assert scheduler.running


@pytest.mark.asyncio
async def test_later_fleet_failure_keeps_last_good_snapshot() -> None:
    source = FakeSource(fleet_results=[_fleet(101), ReeferTransportError("connection reset")])
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        good = scheduler.state.fleet

        await scheduler.refresh_now()

        assert source.fleet_calls == 2
        assert scheduler.state.phase == FleetPhase.IDLE
        assert scheduler.state.error is None
        assert scheduler.state.fleet == good


@pytest.mark.asyncio
async def test_overlapping_tick_is_skipped_while_fetch_in_flight() -> None:
    gate = asyncio.Event()
    source = FakeSource(fleet_gate=gate)
    async with PollingScheduler(source, _NEVER) as scheduler:
        await asyncio.sleep(0)
        refresh = asyncio.create_task(scheduler.refresh_now())
        await asyncio.sleep(0)
        gate.set()
        await refresh

        assert source.fleet_calls == 1
        assert scheduler.state.phase == FleetPhase.IDLE


@pytest.mark.asyncio
async def test_detail_view_starts_history_cycle() -> None:
    source = FakeSource(history_results={101: _samples(-12, -5)})
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()

        assert scheduler.history_running
        assert source.history_calls == [101]
        state = scheduler.state
        assert state.view == View.DETAIL
        assert state.history_device_id == 101
        assert state.summary.min == -12.0
        assert state.summary.max == -5.0
        assert state.summary.pct_in_range == 50.0


@pytest.mark.asyncio
async def test_changing_device_restarts_history_cycle() -> None:
    source = FakeSource(history_results={101: _samples(-12), 102: _samples(-3, -4)})
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()
        await scheduler.show_detail(102)
        await scheduler.drain()

        assert source.history_calls == [101, 102]
        assert scheduler.state.history_device_id == 102
        assert len(scheduler.state.history) == 2


@pytest.mark.asyncio
async def test_leaving_detail_view_stops_history_cycle() -> None:
    source = FakeSource()
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()
        assert scheduler.history_running

        await scheduler.show_fleet()

        assert not scheduler.history_running
        assert scheduler.running


@pytest.mark.asyncio
async def test_same_scope_does_not_restart_history_cycle() -> None:
    source = FakeSource()
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()

        assert source.history_calls == [101]


@pytest.mark.asyncio
async def test_history_failure_keeps_previous_window() -> None:
    source = FakeSource(history_results={101: _samples(-12, -13)})
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.show_detail(101)
        await scheduler.drain()
        assert len(scheduler.state.history) == 2

        source.history_results[101] = ReeferTransportError("HTTP 500", status_code=500)
        await scheduler.show_fleet()
        await scheduler.show_detail(101)
        await scheduler.drain()

        assert source.history_calls == [101, 101]
        assert len(scheduler.state.history) == 2


@pytest.mark.asyncio
async def test_detail_selected_before_start_runs_history_on_start() -> None:
    source = FakeSource(history_results={102: _samples(-15)})
    scheduler = PollingScheduler(source, _NEVER)
    await scheduler.show_detail(102)
    assert not scheduler.history_running

    async with scheduler:
        await scheduler.drain()
        assert scheduler.history_running
        assert source.history_calls == [102]
        assert scheduler.state.selected_device_id == 102


@pytest.mark.asyncio
async def test_fleet_cycle_repeats_until_stopped() -> None:
    source = FakeSource()
    scheduler = PollingScheduler(source, 0.01)
    await scheduler.start()
    for _ in range(100):
        if source.fleet_calls >= 3:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()

    calls = source.fleet_calls
    assert calls >= 3
    await asyncio.sleep(0.05)
    assert source.fleet_calls == calls
    assert not scheduler.running


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PollingScheduler(FakeSource(), 0)


@pytest.mark.asyncio
async def test_unexpected_first_fleet_failure_still_shows_error() -> None:
    source = FakeSource(fleet_results=[RuntimeError("socket closed")])
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()

        assert scheduler.state.phase == FleetPhase.ERROR
        assert scheduler.state.error == "socket closed"


@pytest.mark.asyncio
async def test_unexpected_later_fleet_failure_returns_to_idle() -> None:
    source = FakeSource(fleet_results=[_fleet(101), RuntimeError("socket closed")])
    async with PollingScheduler(source, _NEVER) as scheduler:
        await scheduler.drain()
        await scheduler.refresh_now()

        assert scheduler.state.phase == FleetPhase.IDLE
        assert [item.id for item in scheduler.state.fleet] == [101]
