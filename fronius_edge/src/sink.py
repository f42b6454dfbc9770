"""
InfluxDB v2 sink for metric records.

Converts metric records into ``influxdb_client.Point`` objects (measurement,
``device`` tag, non-null fields, nanosecond timestamp) and writes them with
the async write API. A fresh sink, and therefore a fresh HTTP session, is
created for every collection cycle via :func:`influx_sink_from_env`.

Operations:
- write(bucket, records): write one batch, raise SinkWriteError on failure.
- close(): close the underlying client session.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import aiohttp
from influxdb_client import Point, WritePrecision
from influxdb_client.client.influxdb_client_async import InfluxDBClientAsync
from influxdb_client.rest import ApiException

from fronius_edge.src.config import load_influx_settings
from fronius_edge.src.errors import SinkWriteError

if TYPE_CHECKING:
    from fronius_edge.src.models import MetricRecord

logger = logging.getLogger(__name__)


def to_point(record: MetricRecord) -> Point:
    """Build the InfluxDB point for one record. Absent fields are omitted."""
    point = Point(record.measurement)
    for name, value in record.tags().items():
        point = point.tag(name, value)
    for name, value in record.fields().items():
        point = point.field(name, value)
    return point.time(record.time, WritePrecision.NS)


class InfluxSink:
    """Async InfluxDB v2 writer.

    Args:
        url: InfluxDB base URL.
        org: Organization the bucket belongs to.
        token: API token with write permission.
        bucket: Default destination bucket for :meth:`write`.
        timeout_ms: HTTP timeout for writes in milliseconds.

    Usage::

        async with InfluxSink(url=..., org=..., token=..., bucket=...) as sink:
            await sink.write(sink.bucket, [record])
    """

    def __init__(
        self,
        *,
        url: str,
        org: str,
        token: str,
        bucket: str,
        timeout_ms: int = 10_000,
    ) -> None:
        self._url = url
        self._org = org
        self._bucket = bucket
        self._client = InfluxDBClientAsync(
            url=url,
            token=token,
            org=org,
            timeout=timeout_ms,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    async def write(self, bucket: str, records: Sequence[MetricRecord]) -> None:
        """Write *records* to *bucket* as one batch.

        Raises:
            SinkWriteError: On HTTP error responses, transport failures,
                timeouts, or if the server does not acknowledge the write.
        """
        points = [to_point(record) for record in records]
        try:
            ok = await self._client.write_api().write(
                bucket=bucket,
                org=self._org,
                record=points,
                write_precision=WritePrecision.NS,
            )
        except ApiException as exc:
            raise SinkWriteError(
                f"InfluxDB rejected write to '{bucket}' (HTTP {exc.status}): {exc.reason}"
            ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SinkWriteError(
                f"InfluxDB write to {self._url} failed: {exc!r}"
            ) from exc

        if not ok:
            raise SinkWriteError(f"InfluxDB did not acknowledge write to '{bucket}'")
        logger.debug("Wrote %d point(s) to bucket '%s'", len(points), bucket)

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> InfluxSink:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


SinkFactory = Callable[[], InfluxSink]
"""Builds the sink for one cycle. May raise ConfigurationError."""


def influx_sink_from_env() -> InfluxSink:
    """Build an :class:`InfluxSink` from ``INFLUX_DB_*`` environment variables.

    Raises:
        ConfigurationError: If a required variable is missing or invalid.
    """
    settings = load_influx_settings()
    return InfluxSink(
        url=settings.influx_db_url,
        org=settings.influx_db_org,
        token=settings.influx_db_token,
        bucket=settings.influx_db_bucket,
        timeout_ms=settings.influx_db_timeout_ms,
    )
