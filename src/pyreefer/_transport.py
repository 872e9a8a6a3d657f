"""HTTP transport with bearer-token authentication."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyreefer._constants import USER_AGENT
from pyreefer.config import ReeferConfig
from pyreefer.exceptions import ReeferParseError, ReeferTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class HttpTransport:
    """GET JSON documents from the Traccar API, forwarding the bearer token."""

    def __init__(self, config: ReeferConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "authorization": f"Bearer {self._config.token}",
            "user-agent": USER_AGENT,
        }

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        """GET ``base_url + endpoint`` and return the decoded JSON body.

        Raises
        ------
        ReeferTransportError
            Network failure, timeout or non-200 status.
        ReeferParseError
            Body is not valid UTF-8 JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("GET %s params=%s", url, dict(params or {}))

        try:
            async with self._http.get(url, params=params, headers=self._headers()) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise ReeferTransportError(
                        f"HTTP {resp.status} from {endpoint}: {body[:200].decode('utf-8', 'replace')}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except ReeferTransportError:
            raise
        except TimeoutError as exc:
            raise ReeferTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise ReeferTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ReeferParseError(
                f"Invalid JSON from {endpoint}: {body[:200]!r}",
                endpoint=endpoint,
            ) from exc
