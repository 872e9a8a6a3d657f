"""Shared helpers for Traccar endpoint modules.

It is internal to pyreefer and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pyreefer._transport import Transport
from pyreefer.exceptions import ReeferParseError

M = TypeVar("M", bound=BaseModel)


async def fetch_list(
    *,
    endpoint: str,
    transport: Transport,
    model: type[M],
    params: Mapping[str, str] | None = None,
) -> list[M]:
    """GET *endpoint* and validate every element of the JSON array as *model*."""
    decoded: Any = await transport.get_json(endpoint, params)
    if not isinstance(decoded, list):
        raise ReeferParseError(
            f"{endpoint} returned {type(decoded).__name__}, expected a JSON array",
            endpoint=endpoint,
        )
    try:
        return [model.model_validate(item) for item in decoded]
    except ValidationError as exc:
        raise ReeferParseError(
            f"{endpoint} returned an invalid {model.__name__}: {exc.errors()[0].get('msg', exc)}",
            endpoint=endpoint,
        ) from exc
