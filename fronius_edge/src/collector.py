"""
Collection cycle: fetch seven categories, then write each record on its own.

One cycle runs the seven fetch-and-map operations strictly in order and
unconditionally; a failing category is logged and skipped, it never stops the
others. After fetching, the sink for this cycle is built from the current
environment. If that fails the whole cycle aborts with ConfigurationError
(a cycle-level error handled by the scheduler). Otherwise every record is
written as a one-element batch, awaited before the next; a failed write is
logged and the remaining writes proceed.

There is no retry and nothing is carried over to the next cycle.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fronius_edge.src.errors import FetchError, SinkWriteError
from fronius_edge.src.normalizer import (
    Clock,
    fetch_inverter,
    fetch_inverter_info,
    fetch_inverter_phase,
    fetch_meter,
    fetch_ohm_pilot,
    fetch_power_flow,
    fetch_storage,
)

if TYPE_CHECKING:
    from fronius_edge.src.device_id import DeviceIds
    from fronius_edge.src.fronius_client import FroniusClient
    from fronius_edge.src.models import MetricRecord
    from fronius_edge.src.sink import SinkFactory

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = (
    "inverter_data",
    "inverter_phase_data",
    "inverter_info",
    "meter_data",
    "storage_data",
    "ohm_pilot_data",
    "power_flow_data",
)
"""Category names in fetch and dispatch order. Used in every diagnostic."""


@dataclass
class CycleReport:
    """Outcome of one collection cycle, per category."""

    fetched: list[str] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    fetch_failures: list[str] = field(default_factory=list)
    write_failures: list[str] = field(default_factory=list)

    def failed_categories(self) -> list[str]:
        return [c for c in CATEGORIES if c in self.fetch_failures or c in self.write_failures]


def _fetch_steps(
    client: FroniusClient,
    device_ids: DeviceIds,
    clock: Clock,
) -> list[tuple[str, Callable[[], Awaitable[MetricRecord]]]]:
    return [
        ("inverter_data", lambda: fetch_inverter(client, device_ids.inverter, clock=clock)),
        (
            "inverter_phase_data",
            lambda: fetch_inverter_phase(client, device_ids.inverter, clock=clock),
        ),
        ("inverter_info", lambda: fetch_inverter_info(client, device_ids.inverter, clock=clock)),
        ("meter_data", lambda: fetch_meter(client, device_ids.meter, clock=clock)),
        ("storage_data", lambda: fetch_storage(client, device_ids.storage, clock=clock)),
        ("ohm_pilot_data", lambda: fetch_ohm_pilot(client, device_ids.ohm_pilot, clock=clock)),
        ("power_flow_data", lambda: fetch_power_flow(client, clock=clock)),
    ]


async def fetch_all(
    *,
    client: FroniusClient,
    device_ids: DeviceIds,
    report: CycleReport,
    clock: Clock = time.time_ns,
) -> list[tuple[str, MetricRecord]]:
    """Run every fetch-and-map step in order, returning the successful records.

    Failures are logged with their category and recorded in *report*.
    """
    records: list[tuple[str, MetricRecord]] = []
    for category, step in _fetch_steps(client, device_ids, clock):
        try:
            record = await step()
        except FetchError as exc:
            logger.warning("Error during fetch of %s occurred: %s", category, exc)
            report.fetch_failures.append(category)
            continue
        except Exception:
            logger.error("Unexpected error during fetch of %s", category, exc_info=True)
            report.fetch_failures.append(category)
            continue
        report.fetched.append(category)
        records.append((category, record))
    return records


async def collect_cycle(
    *,
    client: FroniusClient,
    sink_factory: SinkFactory,
    device_ids: DeviceIds,
    clock: Clock = time.time_ns,
) -> CycleReport:
    """Execute one fetch-map-write cycle.

    Args:
        client: Long-lived Fronius client shared across cycles.
        sink_factory: Builds this cycle's sink from the environment.
        device_ids: Device instances to query.
        clock: Nanosecond clock used to stamp each record at mapping time.

    Returns:
        A :class:`CycleReport`. A cycle in which every category fails still
        returns normally.

    Raises:
        ConfigurationError: If the sink configuration is unavailable.
    """
    report = CycleReport()
    records = await fetch_all(
        client=client,
        device_ids=device_ids,
        report=report,
        clock=clock,
    )

    sink = sink_factory()
    async with sink:
        for category, record in records:
            try:
                await sink.write(sink.bucket, [record])
            except SinkWriteError as exc:
                logger.warning(
                    "Error during influxdb write of %s occurred: %s", category, exc
                )
                report.write_failures.append(category)
                continue
            except Exception:
                logger.error(
                    "Unexpected error during influxdb write of %s", category, exc_info=True
                )
                report.write_failures.append(category)
                continue
            report.written.append(category)

    logger.info(
        "Cycle complete: fetched=%d written=%d failed=%s",
        len(report.fetched),
        len(report.written),
        report.failed_categories(),
    )
    return report
