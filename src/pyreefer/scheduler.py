"""Periodic refresh of the fleet snapshot and the selected vehicle's history.

Two independent cycles share one cadence:

* the **fleet cycle** fetches devices and positions, joins them and
  publishes the fleet snapshot.  It runs from :meth:`PollingScheduler.start`
  until :meth:`PollingScheduler.stop`.
* the **history cycle** fetches the trailing window of the selected
  vehicle.  It only runs while the detail view is active and restarts
  whenever the selected vehicle or the view changes.

A tick that comes due while the previous fetch of the same cycle is
still outstanding is skipped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from pyreefer.exceptions import ReeferError
from pyreefer.models.fleet import FleetItem
from pyreefer.models.history import HistoricalSample
from pyreefer.state.session import (
    SessionState,
    View,
    fetch_fleet_failed,
    fetch_fleet_started,
    fetch_fleet_succeeded,
    history_window_updated,
    select_device,
    set_view,
)
from pyreefer.state.store import SessionStore

_logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TelemetrySource(Protocol):
    """What the scheduler needs from a client (see :class:`pyreefer.client.ReeferClient`)."""

    async def get_fleet(self) -> Sequence[FleetItem]:
        ...

    async def get_history_samples(self, device_id: int) -> Sequence[HistoricalSample]:
        ...


class _Cycle:
    """One periodic loop: a timer task plus at most one in-flight tick."""

    def __init__(self, name: str, interval: float, tick: Callable[[], Awaitable[None]]) -> None:
        self._name = name
        self._interval = interval
        self._tick = tick
        self._timer: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def busy(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def inflight(self) -> asyncio.Task[None] | None:
        return self._inflight if self.busy else None

    def start(self) -> None:
        """Fetch immediately, then every ``interval`` seconds."""
        if self.running:
            return
        self.trigger()
        self._timer = asyncio.create_task(self._run(), name=f"pyreefer-{self._name}-timer")

    def trigger(self) -> asyncio.Task[None] | None:
        """Launch a tick now unless one is already in flight.

        Returns the in-flight tick task.
        """
        if self.busy:
            _logger.debug("Skipping %s tick: previous fetch still in flight", self._name)
            return self._inflight
        task = asyncio.create_task(self._tick(), name=f"pyreefer-{self._name}-tick")
        task.add_done_callback(self._on_tick_done)
        self._inflight = task
        return task

    async def stop(self) -> None:
        """Cancel the timer and any in-flight fetch."""
        current = asyncio.current_task()
        tasks = [task for task in (self._timer, self._inflight) if task is not None and not task.done()]
        self._timer = None
        self._inflight = None
        for task in tasks:
            if task is not current:
                task.cancel()
        pending = [task for task in tasks if task is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.trigger()

    def _on_tick_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Unexpected failure in %s tick", self._name, exc_info=exc)


class PollingScheduler:
    """Drive the fleet and history cycles and publish results to a :class:`SessionStore`.

    Parameters
    ----------
    source : TelemetrySource
        Usually an entered :class:`pyreefer.client.ReeferClient`.
    interval : float
        Seconds between ticks, shared by both cycles.
    store : SessionStore or None
        Store receiving the transitions.  A fresh one is created when omitted.

    Usage::

        async with ReeferClient(config) as client:
            async with PollingScheduler(client, config.poll_interval) as scheduler:
                await scheduler.show_detail(device_id)
                ...
    """

    def __init__(
        self,
        source: TelemetrySource,
        interval: float,
        *,
        store: SessionStore | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._source = source
        self._interval = interval
        self._store = store or SessionStore()
        self._fleet_cycle = _Cycle("fleet", interval, self._fleet_tick)
        self._history_cycle: _Cycle | None = None
        self._history_scope: tuple[int, View] | None = None

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def state(self) -> SessionState:
        return self._store.state

    @property
    def running(self) -> bool:
        return self._fleet_cycle.running

    @property
    def history_running(self) -> bool:
        return self._history_cycle is not None and self._history_cycle.running

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PollingScheduler:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Start the fleet cycle (and the history cycle if the detail view is active)."""
        self._fleet_cycle.start()
        await self._sync_history()

    async def stop(self) -> None:
        """Cancel both cycles, including in-flight fetches."""
        # Fleet first: a finishing fleet tick may otherwise restart history.
        await self._fleet_cycle.stop()
        await self._stop_history()

    async def refresh_now(self) -> None:
        """Fetch the fleet immediately (or join the fetch already in flight) and wait for it."""
        task = self._fleet_cycle.trigger()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def drain(self) -> None:
        """Wait until neither cycle has a fetch in flight."""
        while True:
            pending = [
                task
                for task in (
                    self._fleet_cycle.inflight,
                    self._history_cycle.inflight if self._history_cycle is not None else None,
                )
                if task is not None
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Control inputs
    # ------------------------------------------------------------------

    async def select(self, device_id: int | None = _UNSET, view: View | None = None) -> SessionState:
        """Change the selected device and/or the active view.

        The history cycle is restarted when its scope changes and
        stopped when the detail view is left.
        """
        if device_id is not _UNSET:
            self._store.apply(select_device, device_id)
        if view is not None:
            self._store.apply(set_view, view)
        await self._sync_history()
        return self._store.state

    async def show_detail(self, device_id: int) -> SessionState:
        return await self.select(device_id, View.DETAIL)

    async def show_fleet(self) -> SessionState:
        return await self.select(view=View.FLEET)

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    async def _fleet_tick(self) -> None:
        self._store.apply(fetch_fleet_started)
        try:
            fleet = await self._source.get_fleet()
        except ReeferError as exc:
            if self._store.state.has_fleet:
                _logger.warning(
                    "Fleet refresh failed, keeping snapshot from %s: %s",
                    self._store.state.fleet_updated_at,
                    exc,
                )
            else:
                _logger.error("Initial fleet fetch failed: %s", exc)
            self._store.apply(fetch_fleet_failed, exc)
            return
        except Exception as exc:
            # The fetch still ends; the tick done callback logs the error.
            self._store.apply(fetch_fleet_failed, exc)
            raise
        self._store.apply(fetch_fleet_succeeded, fleet)
        _logger.debug("Fleet snapshot updated: %d vehicles", len(fleet))
        # The first snapshot may have auto-selected a device.
        await self._sync_history()

    async def _history_tick(self, device_id: int) -> None:
        try:
            samples = await self._source.get_history_samples(device_id)
        except ReeferError as exc:
            _logger.warning("History refresh for device %s failed, keeping previous window: %s", device_id, exc)
            return
        self._store.apply(history_window_updated, device_id, samples)

    async def _sync_history(self) -> None:
        state = self._store.state
        if not self.running or not state.history_active or state.selected_device_id is None:
            await self._stop_history()
            return

        scope = (state.selected_device_id, state.view)
        if scope == self._history_scope and self.history_running:
            return

        device_id = state.selected_device_id

        async def _tick() -> None:
            await self._history_tick(device_id)

        previous = self._history_cycle
        self._history_scope = scope
        self._history_cycle = _Cycle(f"history-{device_id}", self._interval, _tick)
        self._history_cycle.start()
        _logger.debug("History cycle started for device %s", device_id)
        if previous is not None:
            await previous.stop()

    async def _stop_history(self) -> None:
        cycle = self._history_cycle
        self._history_cycle = None
        self._history_scope = None
        if cycle is not None:
            await cycle.stop()
