"""
Collector configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Two settings groups are kept separate because they are read at different
times:

- CollectorSettings is read once at startup. Any error is fatal.
- InfluxSettings is read at the start of every cycle's dispatch phase. Any
  error aborts only that cycle.

CHANGELOG:
- 2026-10-16: Split into startup (Fronius) and per-cycle (InfluxDB) settings

TODO:
- None
"""

from __future__ import annotations

import logging
from ipaddress import IPv4Address

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from fronius_edge.src.device_id import DeviceIds
from fronius_edge.src.errors import ConfigurationError, InvalidDeviceIdError


class CollectorSettings(BaseSettings):
    """Startup configuration for the Fronius collector.

    Attributes:
        fronius_ip: IPv4 address of the Fronius device on the local LAN.
        fronius_timeout_s: Per-request timeout for Solar API calls.
        inverter_id: Inverter device number (0-99).
        meter_id: Meter device number (0-65535).
        storage_id: Storage device number (0-65535).
        ohm_pilot_id: Ohmpilot device number (0-65535).
        health_path: Optional path of the JSON health file.
        log_level: Root log level name.
    """

    fronius_ip: IPv4Address
    fronius_timeout_s: float = 10.0
    inverter_id: int = 1
    meter_id: int = 0
    storage_id: int = 0
    ohm_pilot_id: int = 0
    health_path: str | None = None
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("fronius_timeout_s")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("FRONIUS_TIMEOUT_S must be > 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level name")
        return level

    def device_ids(self) -> DeviceIds:
        """Build validated device identifiers from the configured numbers.

        Raises:
            InvalidDeviceIdError: If a number is out of range for its class.
        """
        return DeviceIds.from_numbers(
            inverter=self.inverter_id,
            meter=self.meter_id,
            storage=self.storage_id,
            ohm_pilot=self.ohm_pilot_id,
        )


class InfluxSettings(BaseSettings):
    """InfluxDB v2 destination for metric records.

    Attributes:
        influx_db_url: InfluxDB base URL, e.g. ``http://influxdb:8086``.
        influx_db_org: Organization name or id.
        influx_db_token: API token with write access to the bucket.
        influx_db_bucket: Destination bucket.
        influx_db_timeout_ms: Write timeout in milliseconds.
    """

    influx_db_url: str
    influx_db_org: str
    influx_db_token: str
    influx_db_bucket: str
    influx_db_timeout_ms: int = 10_000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("influx_db_url")
    @classmethod
    def url_must_be_http(cls, v: str) -> str:
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(
                f"INFLUX_DB_URL must start with http:// or https:// (got: '{v[:20]}')"
            )
        return v.rstrip("/")

    @field_validator("influx_db_org", "influx_db_token", "influx_db_bucket")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must not be empty")
        return v

    @field_validator("influx_db_timeout_ms")
    @classmethod
    def timeout_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("INFLUX_DB_TIMEOUT_MS must be > 0")
        return v


def load_collector_settings() -> CollectorSettings:
    """Read startup settings, raising ConfigurationError on any problem."""
    try:
        settings = CollectorSettings()
        settings.device_ids()
    except (ValidationError, InvalidDeviceIdError) as exc:
        raise ConfigurationError(f"Invalid collector configuration: {exc}") from exc
    return settings


def load_influx_settings() -> InfluxSettings:
    """Read InfluxDB settings, raising ConfigurationError on any problem."""
    try:
        return InfluxSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid InfluxDB configuration: {exc}") from exc
