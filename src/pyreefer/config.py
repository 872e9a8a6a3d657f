"""Client configuration for pyreefer."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs, urlsplit

from pyreefer._constants import DEFAULT_HISTORY_HOURS, DEFAULT_POLL_INTERVAL_S
from pyreefer.exceptions import ReeferConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ReeferConfigError(f"{key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ReeferConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the Traccar server (e.g. ``"http://gps.example.com"``).
        The ``/api/...`` paths are appended to it.
    token : str
        Bearer token forwarded on every request.
    poll_interval : float
        Seconds between two ticks of the fleet and history cycles.
        Both cycles share this cadence.
    history_hours : float
        Length of the trailing window fetched by the history cycle.
    token_param : str
        Query parameter that carries the token on the hosting page URL.
    """

    base_url: str
    token: str
    poll_interval: float = DEFAULT_POLL_INTERVAL_S
    history_hours: float = DEFAULT_HISTORY_HOURS
    token_param: str = "token"

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise ReeferConfigError("base_url must be non-empty")
        if not self.token.strip():
            raise ReeferConfigError("token must be non-empty")
        if self.poll_interval <= 0:
            raise ReeferConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.history_hours <= 0:
            raise ReeferConfigError(f"history_hours must be positive, got {self.history_hours}")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "token", self.token.strip())

    @classmethod
    def from_env(cls, **overrides: Any) -> ReeferConfig:
        """Create configuration from environment variables.

        Reads ``REEFER_BASE_URL``, ``REEFER_TOKEN`` and the optional
        ``REEFER_POLL_INTERVAL`` / ``REEFER_HISTORY_HOURS``. Explicit
        keyword arguments override environment values.

        Raises
        ------
        ReeferConfigError
            When a required value is missing or a numeric value is invalid.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in (("REEFER_BASE_URL", "base_url"), ("REEFER_TOKEN", "token")):
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "poll_interval" not in overrides:
            interval = _env_float(env, "REEFER_POLL_INTERVAL")
            if interval is not None:
                config_kwargs["poll_interval"] = interval

        if "history_hours" not in overrides:
            hours = _env_float(env, "REEFER_HISTORY_HOURS")
            if hours is not None:
                config_kwargs["history_hours"] = hours

        config_kwargs.update(overrides)

        missing = [name for name in ("base_url", "token") if name not in config_kwargs]
        if missing:
            raise ReeferConfigError(f"missing configuration: {', '.join(missing)}")
        return cls(**config_kwargs)

    @classmethod
    def from_page_url(cls, page_url: str, *, token_param: str = "token", **overrides: Any) -> ReeferConfig:
        """Build a configuration from the URL of the hosting dashboard page.

        The bearer token is taken from the *token_param* query parameter.
        ``base_url`` defaults to the page's scheme and host.
        """
        parts = urlsplit(page_url)
        tokens = parse_qs(parts.query).get(token_param)
        if not tokens or not tokens[0].strip():
            raise ReeferConfigError(f"page URL has no {token_param!r} query parameter")

        config_kwargs: dict[str, Any] = {"token": tokens[0], "token_param": token_param}
        if parts.scheme and parts.netloc:
            config_kwargs["base_url"] = f"{parts.scheme}://{parts.netloc}"
        config_kwargs.update(overrides)

        if "base_url" not in config_kwargs:
            raise ReeferConfigError("base_url could not be derived from the page URL")
        return cls(**config_kwargs)
