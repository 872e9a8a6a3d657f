"""Base model for Traccar API records.

Every API record model inherits from :class:`ReeferBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that coerces a missing or
  malformed ``attributes`` bag to an empty dict.
* :data:`ApiTimestamp`, an annotated type that turns ISO-8601 strings
  into aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from pyreefer.ingestion.normalize import parse_timestamp

ApiTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces ISO-8601 strings to UTC datetimes (``None`` when unparseable)."""


class ReeferBaseModel(BaseModel):
    """Base for Traccar API record models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    attributes: dict[str, Any] = Field(default_factory=dict)
    """Free-form key → scalar attribute bag."""

    @model_validator(mode="before")
    @classmethod
    def _clean_attributes(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        attributes = values.get("attributes")
        if attributes is not None and not isinstance(attributes, dict):
            cleaned = dict(values)
            cleaned["attributes"] = {}
            return cleaned
        if attributes is None and "attributes" in values:
            cleaned = dict(values)
            del cleaned["attributes"]
            return cleaned
        return values
