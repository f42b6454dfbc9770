"""
Async HTTP client for the Fronius Solar API v1.

Wraps a single long-lived ``httpx.AsyncClient`` (one connection pool per
process) and exposes one typed query per Solar API endpoint. Every query
either returns a validated pydantic model or raises a
:class:`~fronius_edge.src.errors.FetchError` subclass:

- DeviceTransportError: connection failure, timeout, non-2xx status.
- DeviceDecodeError: invalid JSON or schema mismatch.
- DeviceProtocolError: ``Head.Status.Code`` is non-zero.

The client never swallows errors; the collection cycle decides what to do
with them.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from fronius_edge.src.device_id import DeviceClass, DeviceId
from fronius_edge.src.errors import (
    DeviceDecodeError,
    DeviceProtocolError,
    DeviceTransportError,
    InvalidDeviceIdError,
)
from fronius_edge.src.responses import (
    ApiVersion,
    CommonInverterData,
    InverterInfoEntry,
    MeterRealtimeData,
    OhmPilotRealtimeData,
    PowerFlowRealtimeData,
    ResponseHead,
    StorageRealtimeData,
    ThreePhaseInverterData,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_S: float = 10.0
"""Timeout per Solar API request in seconds."""

DEFAULT_BASE_PATH: str = "/solar_api/v1/"
"""Solar API base path used until GetAPIVersion reports otherwise."""

API_VERSION_PATH: str = "/solar_api/GetAPIVersion.cgi"

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_INVERTER_INFO_ADAPTER: TypeAdapter[dict[str, InverterInfoEntry | None]] = TypeAdapter(
    dict[str, InverterInfoEntry | None]
)


class InverterDataCollection(str, Enum):
    """Values of the ``DataCollection`` parameter of GetInverterRealtimeData."""

    COMMON = "CommonInverterData"
    THREE_PHASE = "3PInverterData"


_COLLECTION_MODELS: dict[InverterDataCollection, type[BaseModel]] = {
    InverterDataCollection.COMMON: CommonInverterData,
    InverterDataCollection.THREE_PHASE: ThreePhaseInverterData,
}


class FroniusClient:
    """Typed async client for one Fronius Datamanager / GEN24 device.

    Args:
        host: Device IP address or hostname on the local LAN.
        timeout: Per-request timeout in seconds.
        base_path: Solar API base path (as reported by GetAPIVersion).
        transport: Optional httpx transport, used by tests to mock the device.

    Usage::

        async with await FroniusClient.connect("192.168.1.50") as client:
            info = await client.get_inverter_info()
    """

    def __init__(
        self,
        host: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        base_path: str = DEFAULT_BASE_PATH,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._host = host
        self._base_path = base_path
        self._client = httpx.AsyncClient(
            base_url=f"http://{host}",
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    async def connect(
        cls,
        host: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> FroniusClient:
        """Create a client and probe the device's Solar API version.

        Raises:
            FetchError: If the device cannot be reached or answers garbage.
                The underlying connection pool is closed before re-raising.
        """
        client = cls(host, timeout=timeout, transport=transport)
        try:
            version = await client.get_api_version()
        except Exception:
            await client.aclose()
            raise
        client._base_path = version.base_url
        logger.info(
            "Connected to Fronius device at %s (APIVersion=%d, BaseURL=%s)",
            host,
            version.api_version,
            version.base_url,
        )
        return client

    @property
    def host(self) -> str:
        return self._host

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> FroniusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    async def get_api_version(self) -> ApiVersion:
        payload = await self._get_json(API_VERSION_PATH)
        return _validate(ApiVersion, payload)

    async def get_inverter_realtime_data(
        self,
        device_id: DeviceId,
        collection: InverterDataCollection,
    ) -> CommonInverterData | ThreePhaseInverterData:
        """Query realtime data of one inverter for the given data collection."""
        _require_class(device_id, DeviceClass.INVERTER)
        data = await self._get_data(
            "GetInverterRealtimeData.cgi",
            {
                "Scope": "Device",
                "DeviceId": device_id.number,
                "DataCollection": collection.value,
            },
        )
        return _validate(_COLLECTION_MODELS[collection], data)  # type: ignore[return-value]

    async def get_inverter_info(self) -> dict[str, InverterInfoEntry | None]:
        """Return the info map of all inverters, keyed by device id string."""
        data = await self._get_data("GetInverterInfo.cgi")
        try:
            return _INVERTER_INFO_ADAPTER.validate_python(data)
        except ValidationError as exc:
            raise DeviceDecodeError(f"Invalid GetInverterInfo body: {exc}") from exc

    async def get_meter_realtime_data(self, device_id: DeviceId) -> MeterRealtimeData:
        _require_class(device_id, DeviceClass.METER)
        data = await self._get_data(
            "GetMeterRealtimeData.cgi",
            {"Scope": "Device", "DeviceId": device_id.number},
        )
        return _validate(MeterRealtimeData, data)

    async def get_storage_realtime_data(self, device_id: DeviceId) -> StorageRealtimeData:
        _require_class(device_id, DeviceClass.STORAGE)
        data = await self._get_data(
            "GetStorageRealtimeData.cgi",
            {"Scope": "Device", "DeviceId": device_id.number},
        )
        return _validate(StorageRealtimeData, data)

    async def get_ohm_pilot_realtime_data(
        self, device_id: DeviceId
    ) -> OhmPilotRealtimeData:
        _require_class(device_id, DeviceClass.OHM_PILOT)
        data = await self._get_data(
            "GetOhmPilotRealtimeData.cgi",
            {"Scope": "Device", "DeviceId": device_id.number},
        )
        return _validate(OhmPilotRealtimeData, data)

    async def get_power_flow_realtime_data(self) -> PowerFlowRealtimeData:
        data = await self._get_data("GetPowerFlowRealtimeData.fcgi")
        return _validate(PowerFlowRealtimeData, data)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_data(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a Solar API endpoint, check the envelope, return ``Body.Data``."""
        payload = await self._get_json(f"{self._base_path}{endpoint}", params)

        try:
            head = ResponseHead.model_validate(payload["Head"])
            body = payload["Body"]
        except (KeyError, TypeError, ValidationError) as exc:
            raise DeviceDecodeError(
                f"Malformed Solar API envelope from {endpoint}: {exc}"
            ) from exc

        if head.status.code != 0:
            raise DeviceProtocolError(
                head.status.code,
                head.status.reason,
                head.status.user_message,
            )

        try:
            return body["Data"]
        except (KeyError, TypeError) as exc:
            raise DeviceDecodeError(f"Missing Body.Data in {endpoint} response") from exc

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise DeviceTransportError(f"Timeout requesting {path}: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise DeviceTransportError(
                f"HTTP {exc.response.status_code} from {path}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DeviceTransportError(f"Request to {path} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DeviceDecodeError(f"Invalid JSON from {path}: {exc}") from exc


def _validate(model: type[_ModelT], data: Any) -> _ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise DeviceDecodeError(f"Invalid {model.__name__} body: {exc}") from exc


def _require_class(device_id: DeviceId, expected: DeviceClass) -> None:
    if device_id.device_class is not expected:
        raise InvalidDeviceIdError(
            f"Expected a {expected.value} device id, got {device_id.device_class.value}"
        )
