"""
Unit tests for the InfluxDB sink.

Tests verify:
- Records become points with measurement, device tag, non-null fields and a
  nanosecond timestamp.
- write() passes bucket, org and points to the async write API.
- HTTP errors, transport errors, timeouts and unacknowledged writes raise
  SinkWriteError.
- influx_sink_from_env() reads INFLUX_DB_* and raises ConfigurationError when
  they are missing.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
from fronius_edge.src.errors import ConfigurationError, SinkWriteError
from fronius_edge.src.models import InverterData, InverterInfo, PowerFlowData
from fronius_edge.src.sink import InfluxSink, influx_sink_from_env, to_point
from influxdb_client import WritePrecision
from influxdb_client.rest import ApiException

_TS = 1_781_600_000_123_456_789


def _make_sink(write_result: object = True) -> tuple[InfluxSink, MagicMock]:
    """Create an InfluxSink whose InfluxDBClientAsync is a mock."""
    with patch("fronius_edge.src.sink.InfluxDBClientAsync") as mock_cls:
        client = MagicMock()
        client.close = AsyncMock()
        write_api = MagicMock()
        if isinstance(write_result, BaseException):
            write_api.write = AsyncMock(side_effect=write_result)
        else:
            write_api.write = AsyncMock(return_value=write_result)
        client.write_api.return_value = write_api
        mock_cls.return_value = client
        sink = InfluxSink(
            url="http://influxdb.local:8086",
            org="home",
            token="tok",
            bucket="fronius",
        )
    return sink, client


# ---------------------------------------------------------------------------
# to_point
# ---------------------------------------------------------------------------


class TestToPoint:
    def test_absent_fields_are_omitted(self) -> None:
        record = InverterData(ac_power=540.2, time=_TS)

        line = to_point(record).to_line_protocol()

        assert line.startswith("inverter,device=Inverter ")
        assert "ac_power=540.2" in line
        assert "ac_current" not in line
        assert "total_energy" not in line
        assert line.endswith(f" {_TS}")

    def test_field_types(self) -> None:
        record = InverterInfo(
            device_type=1,
            pv_power=8000,
            name="Symo",
            is_visualized=True,
            id="123",
            error_code=0,
            status_code="7",
            state="Running",
            time=_TS,
        )

        line = to_point(record).to_line_protocol()

        assert "device_type=1i" in line
        assert "pv_power=8000i" in line
        assert 'name="Symo"' in line
        assert "is_visualized=true" in line
        assert 'status_code="7"' in line

    def test_unknown_device_tag(self) -> None:
        record = PowerFlowData(photovoltaik=12.5, time=_TS)

        line = to_point(record).to_line_protocol()

        assert line.startswith("power_flow,device=Unknown ")


# ---------------------------------------------------------------------------
# InfluxSink.write
# ---------------------------------------------------------------------------


class TestWrite:
    @pytest.mark.asyncio
    async def test_write_passes_bucket_org_and_points(self) -> None:
        sink, client = _make_sink()
        record = InverterData(ac_power=1.0, time=_TS)

        await sink.write("fronius", [record])

        write = client.write_api.return_value.write
        write.assert_awaited_once()
        kwargs = write.call_args.kwargs
        assert kwargs["bucket"] == "fronius"
        assert kwargs["org"] == "home"
        assert kwargs["write_precision"] == WritePrecision.NS
        assert len(kwargs["record"]) == 1
        assert kwargs["record"][0].to_line_protocol().startswith("inverter,")

    @pytest.mark.asyncio
    async def test_api_exception_raises_sink_write_error(self) -> None:
        sink, _ = _make_sink(ApiException(status=401, reason="Unauthorized"))

        with pytest.raises(SinkWriteError, match="HTTP 401"):
            await sink.write("fronius", [InverterData(time=_TS)])

    @pytest.mark.asyncio
    async def test_transport_error_raises_sink_write_error(self) -> None:
        sink, _ = _make_sink(aiohttp.ClientConnectionError("refused"))

        with pytest.raises(SinkWriteError):
            await sink.write("fronius", [InverterData(time=_TS)])

    @pytest.mark.asyncio
    async def test_timeout_raises_sink_write_error(self) -> None:
        sink, _ = _make_sink(TimeoutError())

        with pytest.raises(SinkWriteError):
            await sink.write("fronius", [InverterData(time=_TS)])

    @pytest.mark.asyncio
    async def test_unacknowledged_write_raises(self) -> None:
        sink, _ = _make_sink(False)

        with pytest.raises(SinkWriteError, match="acknowledge"):
            await sink.write("fronius", [InverterData(time=_TS)])

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self) -> None:
        sink, client = _make_sink()

        async with sink:
            pass

        client.close.assert_awaited_once()


# ---------------------------------------------------------------------------
# influx_sink_from_env
# ---------------------------------------------------------------------------


class TestSinkFromEnv:
    def test_builds_sink_from_env(self, influx_env: dict[str, str]) -> None:
        with patch("fronius_edge.src.sink.InfluxDBClientAsync") as mock_cls:
            sink = influx_sink_from_env()

        assert sink.bucket == influx_env["INFLUX_DB_BUCKET"]
        mock_cls.assert_called_once_with(
            url=influx_env["INFLUX_DB_URL"],
            token=influx_env["INFLUX_DB_TOKEN"],
            org=influx_env["INFLUX_DB_ORG"],
            timeout=10_000,
        )

    def test_missing_env_raises_configuration_error(self) -> None:
        with patch("fronius_edge.src.sink.InfluxDBClientAsync") as mock_cls:
            with pytest.raises(ConfigurationError):
                influx_sink_from_env()

        mock_cls.assert_not_called()
