"""Attribute alias resolution.

Trackers report the same sensor under different attribute keys
(``temp1`` vs ``bleTemp1``, ``door`` vs ``io2``, ...), sometimes on the
position and sometimes on the device itself.  Each logical field is
described by a :class:`FieldRule`: an ordered list of keys, one parser
and a default.  :func:`resolve_first_present` evaluates any rule.

The first key holding a non-null value wins.  Its value is parsed and a
parse failure yields the rule's default; later aliases are not consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pyreefer._constants import DEFAULT_DOOR, DEFAULT_FAN, DEFAULT_SETPOINT_C
from pyreefer.ingestion.normalize import safe_flag, safe_float

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Scope(StrEnum):
    POSITION = "position"
    DEVICE = "device"


@dataclass(frozen=True, slots=True)
class AttributeKey:
    scope: Scope
    key: str


@dataclass(frozen=True)
class FieldRule(Generic[T]):
    """How to resolve one logical field from the attribute bags.

    ``default`` is returned when no key is present or when the first
    present value does not parse.  A ``None`` default marks the field
    as *unresolved* in that case.
    """

    name: str
    keys: tuple[AttributeKey, ...]
    parser: Callable[[Any], T | None]
    default: T | None


def _position(*keys: str) -> tuple[AttributeKey, ...]:
    return tuple(AttributeKey(Scope.POSITION, key) for key in keys)


def _device(*keys: str) -> tuple[AttributeKey, ...]:
    return tuple(AttributeKey(Scope.DEVICE, key) for key in keys)


FLEET_TEMPERATURE: FieldRule[float] = FieldRule(
    name="temperature",
    keys=_position("temp1", "bleTemp1"),
    parser=safe_float,
    default=None,
)

HISTORY_TEMPERATURE: FieldRule[float] = FieldRule(
    name="temperature",
    keys=_position("temp1", "bleTemp1", "temperature"),
    parser=safe_float,
    default=None,
)

DOOR: FieldRule[int] = FieldRule(
    name="door",
    keys=_position("door", "io2") + _device("door", "io2"),
    parser=safe_flag,
    default=DEFAULT_DOOR,
)

SETPOINT: FieldRule[float] = FieldRule(
    name="setpoint",
    keys=_position("setpoint", "targetTemp") + _device("setpoint", "targetTemp"),
    parser=safe_float,
    default=DEFAULT_SETPOINT_C,
)

FAN: FieldRule[int] = FieldRule(
    name="fan",
    keys=_position("fan", "io3"),
    parser=safe_flag,
    default=DEFAULT_FAN,
)


def resolve_first_present(
    rule: FieldRule[T],
    *,
    position: Mapping[str, Any] | None = None,
    device: Mapping[str, Any] | None = None,
) -> T | None:
    """Resolve *rule* against the position and device attribute bags."""
    bags: dict[Scope, Mapping[str, Any]] = {
        Scope.POSITION: position or {},
        Scope.DEVICE: device or {},
    }
    for attribute in rule.keys:
        value = bags[attribute.scope].get(attribute.key)
        if value is None:
            continue
        parsed = rule.parser(value)
        if parsed is None:
            _logger.debug(
                "Unparseable %s value %r under %s.%s; using %r",
                rule.name,
                value,
                attribute.scope,
                attribute.key,
                rule.default,
            )
            return rule.default
        return parsed
    return rule.default
