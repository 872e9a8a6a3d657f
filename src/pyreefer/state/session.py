"""Dashboard session state and its transition functions.

:class:`SessionState` is immutable.  Every change goes through one of
the functions below, each returning a new state; the presentation
layer only ever reads states.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from pyreefer.aggregate import summarize
from pyreefer.models.fleet import FleetItem
from pyreefer.models.history import HistoricalSample, SummaryStats


class FleetPhase(StrEnum):
    LOADING = "loading"
    IDLE = "idle"
    REFRESHING = "refreshing"
    ERROR = "error"


class View(StrEnum):
    FLEET = "fleet"
    DETAIL = "detail"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionState(BaseModel):
    """Read-only snapshot of everything the dashboard shows."""

    model_config = ConfigDict(frozen=True)

    phase: FleetPhase = FleetPhase.LOADING
    fleet: tuple[FleetItem, ...] = ()
    error: str | None = None
    fleet_updated_at: datetime | None = None
    selected_device_id: int | None = None
    view: View = View.FLEET
    history_device_id: int | None = None
    history: tuple[HistoricalSample, ...] = ()
    summary: SummaryStats = Field(default_factory=SummaryStats)
    history_updated_at: datetime | None = None

    @property
    def has_fleet(self) -> bool:
        """Whether a good fleet snapshot was ever received."""
        return self.fleet_updated_at is not None

    @property
    def history_active(self) -> bool:
        return self.view == View.DETAIL and self.selected_device_id is not None

    @property
    def selected_item(self) -> FleetItem | None:
        for item in self.fleet:
            if item.id == self.selected_device_id:
                return item
        return None


def fetch_fleet_started(state: SessionState) -> SessionState:
    if state.phase != FleetPhase.IDLE:
        return state
    return state.model_copy(update={"phase": FleetPhase.REFRESHING})


def fetch_fleet_succeeded(
    state: SessionState,
    fleet: Sequence[FleetItem],
    *,
    now: datetime | None = None,
) -> SessionState:
    update: dict[str, object] = {
        "phase": FleetPhase.IDLE,
        "fleet": tuple(fleet),
        "error": None,
        "fleet_updated_at": now or _utcnow(),
    }
    if state.selected_device_id is None and fleet:
        update["selected_device_id"] = fleet[0].id
    return state.model_copy(update=update)


def fetch_fleet_failed(state: SessionState, error: BaseException | str) -> SessionState:
    """Record a failed fleet fetch.

    Only a failure before any good snapshot is surfaced as the
    ``error`` phase; afterwards the last snapshot is kept.
    """
    message = str(error) or type(error).__name__
    if not state.has_fleet:
        return state.model_copy(update={"phase": FleetPhase.ERROR, "error": message})
    return state.model_copy(update={"phase": FleetPhase.IDLE})


def history_window_updated(
    state: SessionState,
    device_id: int,
    samples: Sequence[HistoricalSample],
    *,
    now: datetime | None = None,
) -> SessionState:
    """Replace the historical window of the selected device.

    A window fetched for a device that is no longer selected is ignored.
    """
    if device_id != state.selected_device_id:
        return state
    window = tuple(samples)
    return state.model_copy(
        update={
            "history_device_id": device_id,
            "history": window,
            "summary": summarize(window),
            "history_updated_at": now or _utcnow(),
        }
    )


def select_device(state: SessionState, device_id: int | None) -> SessionState:
    if device_id == state.selected_device_id:
        return state
    return state.model_copy(
        update={
            "selected_device_id": device_id,
            "history_device_id": None,
            "history": (),
            "summary": SummaryStats(),
            "history_updated_at": None,
        }
    )


def set_view(state: SessionState, view: View) -> SessionState:
    if view == state.view:
        return state
    return state.model_copy(update={"view": view})
