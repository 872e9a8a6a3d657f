"""Custom exception hierarchy for pyreefer."""

from __future__ import annotations


class ReeferError(Exception):
    """Base exception for all pyreefer errors."""


class ReeferConfigError(ReeferError):
    """Invalid or missing configuration."""


class ReeferTransportError(ReeferError):
    """HTTP-level failure (network error, non-200 status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ReeferParseError(ReeferError):
    """Response body could not be decoded into telemetry records.

    Covers invalid JSON, a body of the wrong shape, and records that
    fail model validation.  Attribute-level parse failures never raise;
    they resolve to a default instead.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
