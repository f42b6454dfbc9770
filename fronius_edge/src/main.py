"""
Collector main loop for the Fronius-to-InfluxDB pipeline.

Runs a single sequential asyncio loop: every cycle fetches all seven data
categories from the Fronius Solar API, normalizes them into metric records,
and writes each record to InfluxDB. After a cycle completes the loop waits a
fixed 15 seconds before starting the next one; the cycle's own duration is
not subtracted, so a slow cycle delays later ticks but never skips one.

The loop is resilient: per-category failures are absorbed inside the cycle,
and any cycle-level error (missing InfluxDB configuration, sink construction
failure) is logged without ending the loop. Only startup failures (invalid
FRONIUS_IP or device ids, unreachable device) terminate the process.
SIGTERM/SIGINT set a shared asyncio.Event so the loop stops after the
current cycle.

Structured JSON logging is used for all events.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import json
import logging
import signal
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fronius_edge.src.collector import collect_cycle
from fronius_edge.src.errors import ConfigurationError, FetchError
from fronius_edge.src.health import HealthWriter

if TYPE_CHECKING:
    from fronius_edge.src.collector import CycleReport
    from fronius_edge.src.config import CollectorSettings
    from fronius_edge.src.device_id import DeviceIds
    from fronius_edge.src.fronius_client import FroniusClient
    from fronius_edge.src.sink import SinkFactory

logger = logging.getLogger(__name__)

POLL_INTERVAL_S: float = 15.0
"""Seconds between the end of one cycle and the start of the next."""


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the collector.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def _masked_token(value: str | None) -> str:
    """Return a short non-reversible token fingerprint for diagnostics."""
    if not value:
        return "empty"
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()[:10]
    return f"len={len(value)} sha256={digest}"


# ---------------------------------------------------------------------------
# Startup config logging
# ---------------------------------------------------------------------------


def log_config_summary(settings: CollectorSettings) -> None:
    """Log the startup configuration.

    InfluxDB settings are re-read every cycle; they are summarized here only
    when already available, with the token reduced to a fingerprint.
    """
    logger.info(
        "Collector starting with config: "
        "fronius_ip=%s, fronius_timeout_s=%s, inverter_id=%s, meter_id=%s, "
        "storage_id=%s, ohm_pilot_id=%s, poll_interval_s=%s, health_path=%s",
        settings.fronius_ip,
        settings.fronius_timeout_s,
        settings.inverter_id,
        settings.meter_id,
        settings.storage_id,
        settings.ohm_pilot_id,
        POLL_INTERVAL_S,
        settings.health_path,
    )

    from fronius_edge.src.config import load_influx_settings

    try:
        influx = load_influx_settings()
    except ConfigurationError as exc:
        logger.warning("InfluxDB configuration not available yet: %s", exc)
        return
    logger.info(
        "InfluxDB destination: url=%s, org=%s, bucket=%s, token_masked=%s",
        influx.influx_db_url,
        influx.influx_db_org,
        influx.influx_db_bucket,
        _masked_token(influx.influx_db_token),
    )


# ---------------------------------------------------------------------------
# Single-iteration function (easily testable)
# ---------------------------------------------------------------------------


async def _cycle_once(
    *,
    client: FroniusClient,
    sink_factory: SinkFactory,
    device_ids: DeviceIds,
    health: HealthWriter | None,
) -> CycleReport | None:
    """Execute one collection cycle, absorbing cycle-level errors.

    Returns:
        The cycle report, or ``None`` if the cycle aborted.
    """
    logger.info("Reporting data at: %s", datetime.now(tz=UTC).isoformat())
    try:
        report = await collect_cycle(
            client=client,
            sink_factory=sink_factory,
            device_ids=device_ids,
        )
    except Exception:
        logger.error("Error during fetch occurred", exc_info=True)
        report = None

    if health is not None:
        try:
            if report is not None:
                health.record_cycle(report)
            else:
                health.record_cycle_error()
        except Exception:
            logger.warning("Failed to write health file", exc_info=True)

    return report


# ---------------------------------------------------------------------------
# Loop runner
# ---------------------------------------------------------------------------


async def run_forever(
    *,
    client: FroniusClient,
    sink_factory: SinkFactory,
    device_ids: DeviceIds,
    shutdown_event: asyncio.Event,
    interval_s: float = POLL_INTERVAL_S,
    health: HealthWriter | None = None,
) -> None:
    """Run collection cycles until shutdown_event is set.

    Executes one cycle, then waits *interval_s* seconds counted from the end
    of that cycle. In normal operation the event is never set and the loop
    runs until the process is terminated.

    Args:
        client: Long-lived Fronius client.
        sink_factory: Builds a fresh sink for every cycle.
        device_ids: Device instances to query.
        shutdown_event: Event to signal graceful shutdown.
        interval_s: Seconds between the end of a cycle and the next one.
        health: HealthWriter instance, or None to skip health writes.
    """
    logger.info("Collection loop started (interval=%ss)", interval_s)
    while not shutdown_event.is_set():
        await _cycle_once(
            client=client,
            sink_factory=sink_factory,
            device_ids=device_ids,
            health=health,
        )
        # Use wait with timeout so we can check shutdown between sleeps
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval_s)
    logger.info("Collection loop stopped")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def async_main() -> int:
    """Async entrypoint: load config, connect to the device, run the loop.

    Returns:
        Process exit code. Non-zero only for startup failures.
    """
    configure_logging()

    from fronius_edge.src.config import load_collector_settings
    from fronius_edge.src.fronius_client import FroniusClient
    from fronius_edge.src.sink import influx_sink_from_env

    try:
        settings = load_collector_settings()
    except ConfigurationError:
        logger.critical("Startup failed: invalid configuration", exc_info=True)
        return 1

    logging.getLogger().setLevel(settings.log_level)
    log_config_summary(settings)

    try:
        client = await FroniusClient.connect(
            str(settings.fronius_ip),
            timeout=settings.fronius_timeout_s,
        )
    except FetchError:
        logger.critical(
            "Startup failed: Fronius device at %s not reachable",
            settings.fronius_ip,
            exc_info=True,
        )
        return 1

    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: _handle_signal(shutdown_event),
        )

    health = HealthWriter(settings.health_path) if settings.health_path else None

    async with client:
        await run_forever(
            client=client,
            sink_factory=influx_sink_from_env,
            device_ids=settings.device_ids(),
            shutdown_event=shutdown_event,
            health=health,
        )
    return 0


def _handle_signal(shutdown_event: asyncio.Event) -> None:
    """Handle SIGTERM/SIGINT by setting the shutdown event."""
    logger.info("Received shutdown signal, stopping after the current cycle")
    shutdown_event.set()


def main() -> None:
    """Synchronous entrypoint for the collector."""
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
