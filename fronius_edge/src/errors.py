"""
Exception hierarchy for the Fronius edge collector.

Fetch errors are scoped to a single data category and are absorbed by the
collection cycle. Write errors are scoped to a single dispatch and are also
absorbed. Configuration errors abort the current cycle and are absorbed by
the scheduler loop.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for all collector errors."""


class FetchError(CollectorError):
    """The device did not deliver a usable response for one category."""


class DeviceTransportError(FetchError):
    """Connection failure, timeout, or non-2xx HTTP status from the device."""


class DeviceDecodeError(FetchError):
    """The device response was not valid JSON or did not match the schema."""


class DeviceProtocolError(FetchError):
    """The Solar API envelope reported a non-zero status code.

    Args:
        code: ``Head.Status.Code`` from the response envelope.
        reason: ``Head.Status.Reason`` (may be empty).
        user_message: ``Head.Status.UserMessage`` (may be empty).
    """

    def __init__(self, code: int, reason: str = "", user_message: str = "") -> None:
        self.code = code
        self.reason = reason
        self.user_message = user_message
        detail = reason or user_message or "no reason given"
        super().__init__(f"Solar API status code {code}: {detail}")


class DeviceLookupError(FetchError):
    """The inverter info map does not contain the requested device id."""


class SinkWriteError(CollectorError):
    """The time-series sink rejected or failed to transmit a batch."""


class ConfigurationError(CollectorError):
    """A required environment value is missing or malformed."""


class InvalidDeviceIdError(ValueError):
    """A device number is out of range for its device class."""
