"""In-memory holder of the current session state.

This is the only component allowed to replace the session state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Concatenate, ParamSpec

from pyreefer.state.session import SessionState

_logger = logging.getLogger(__name__)

P = ParamSpec("P")

Listener = Callable[[SessionState], None]


class SessionStore:
    """Single-writer store for :class:`SessionState`.

    Writers call :meth:`apply` with a transition function; subscribers
    receive every new state.  Readers use :attr:`state`.
    """

    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def apply(
        self,
        transition: Callable[Concatenate[SessionState, P], SessionState],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> SessionState:
        """Run ``transition(state, *args, **kwargs)`` and publish the result."""
        new_state = transition(self._state, *args, **kwargs)
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                _logger.debug("Session listener %r failed", listener, exc_info=True)
        return new_state

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict projection of the current state for presentation layers."""
        return self._state.model_dump(mode="json")
