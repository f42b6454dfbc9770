"""
Normalizers that convert Fronius Solar API responses into metric records.

Two layers:

- Pure mappers (``*_record``): take one validated device response and a
  capture timestamp in nanoseconds and return one record. No I/O, no clock.
  The only transforms are renaming, ``> 0`` flag to bool, status codes to
  strings, optional passthrough and flattening of nested objects. Nothing is
  defaulted except the Ohmpilot error code (absent means 0).
- Fetch-and-map coroutines (``fetch_*``): perform exactly one device query,
  read the clock after the response arrived, and call the pure mapper. A
  client failure propagates as a FetchError; there are no partial records.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from fronius_edge.src.errors import DeviceLookupError
from fronius_edge.src.fronius_client import InverterDataCollection
from fronius_edge.src.models import (
    InverterData,
    InverterInfo,
    InverterPhaseData,
    MeterData,
    OhmPilotData,
    PowerFlowData,
    StorageData,
)

if TYPE_CHECKING:
    from fronius_edge.src.device_id import DeviceId
    from fronius_edge.src.fronius_client import FroniusClient
    from fronius_edge.src.responses import (
        CommonInverterData,
        InverterInfoEntry,
        MeterRealtimeData,
        OhmPilotRealtimeData,
        PowerFlowRealtimeData,
        StorageRealtimeData,
        ThreePhaseInverterData,
    )

Clock = Callable[[], int]
"""Returns the current instant in nanoseconds since the Unix epoch."""


# ---------------------------------------------------------------------------
# Pure mappers
# ---------------------------------------------------------------------------


def inverter_record(response: CommonInverterData, time_ns: int) -> InverterData:
    return InverterData(
        ac_power=response.pac.value,
        ac_power_abs=response.sac.value,
        ac_current=response.iac.value,
        ac_voltage=response.uac.value,
        ac_frequency=response.fac.value if response.fac is not None else None,
        dc_current=response.idc.value,
        dc_voltage=response.udc.value,
        total_energy=response.total_energy.value,
        time=time_ns,
    )


def inverter_phase_record(
    response: ThreePhaseInverterData, time_ns: int
) -> InverterPhaseData:
    return InverterPhaseData(
        ac_l1_current=response.iac_l1.value,
        ac_l2_current=response.iac_l2.value,
        ac_l3_current=response.iac_l3.value,
        dc_l1_voltage=response.uac_l1.value,
        dc_l2_voltage=response.uac_l2.value,
        dc_l3_voltage=response.uac_l3.value,
        time=time_ns,
    )


def inverter_info_record(entry: InverterInfoEntry, time_ns: int) -> InverterInfo:
    return InverterInfo(
        device_type=entry.dt,
        pv_power=entry.pv_power,
        name=entry.custom_name,
        is_visualized=entry.show > 0,
        id=entry.unique_id,
        error_code=entry.error_code,
        status_code=str(entry.status_code),
        state=entry.inverter_state,
        time=time_ns,
    )


def meter_record(response: MeterRealtimeData, time_ns: int) -> MeterData:
    return MeterData(
        l1_current=response.current_ac_phase_1,
        l2_current=response.current_ac_phase_2,
        l3_current=response.current_ac_phase_3,
        current=response.current_ac_sum,
        l1_voltage=response.voltage_ac_phase_1,
        l2_voltage=response.voltage_ac_phase_2,
        l3_voltage=response.voltage_ac_phase_3,
        l12_voltage=response.voltage_ac_phase_to_phase_12,
        l23_voltage=response.voltage_ac_phase_to_phase_23,
        l31_voltage=response.voltage_ac_phase_to_phase_31,
        l1_power=response.power_real_p_phase_1,
        l2_power=response.power_real_p_phase_2,
        l3_power=response.power_real_p_phase_3,
        power=response.power_real_p_sum,
        frequency_average=response.frequency_phase_average,
        time=time_ns,
    )


def storage_record(response: StorageRealtimeData, time_ns: int) -> StorageData:
    controller = response.controller
    return StorageData(
        enabled=controller.enable > 0,
        charge_percentage=controller.state_of_charge_relative,
        capacity=controller.capacity_maximum,
        dc_current=controller.current_dc,
        dc_voltage=controller.voltage_dc,
        temperature_cell=controller.temperature_cell,
        time=time_ns,
    )


def ohm_pilot_record(response: OhmPilotRealtimeData, time_ns: int) -> OhmPilotData:
    # A missing error code means the Ohmpilot reports no error.
    error_code = response.code_of_error if response.code_of_error is not None else 0
    return OhmPilotData(
        state=str(response.code_of_state),
        error_code=error_code,
        power=response.power_real_pac_sum,
        temperature=response.temperature_channel_1,
        time=time_ns,
    )


def power_flow_record(response: PowerFlowRealtimeData, time_ns: int) -> PowerFlowData:
    site = response.site
    return PowerFlowData(
        akku=site.p_akku,
        grid=site.p_grid,
        load=site.p_load,
        photovoltaik=site.p_pv,
        relative_autonomy=site.rel_autonomy,
        relative_self_consumption=site.rel_self_consumption,
        time=time_ns,
    )


# ---------------------------------------------------------------------------
# Fetch-and-map
# ---------------------------------------------------------------------------


async def fetch_inverter(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> InverterData:
    response = await client.get_inverter_realtime_data(
        device_id, InverterDataCollection.COMMON
    )
    return inverter_record(response, clock())  # type: ignore[arg-type]


async def fetch_inverter_phase(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> InverterPhaseData:
    response = await client.get_inverter_realtime_data(
        device_id, InverterDataCollection.THREE_PHASE
    )
    return inverter_phase_record(response, clock())  # type: ignore[arg-type]


async def fetch_inverter_info(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> InverterInfo:
    """Fetch the inverter info map and map the entry for *device_id*.

    Raises:
        DeviceLookupError: If the map has no entry (or a null entry) for the
            queried id. The device then reports a different set of inverters
            than configured, which is treated as a failed fetch.
    """
    info = await client.get_inverter_info()
    key = str(device_id)
    entry = info.get(key)
    if entry is None:
        raise DeviceLookupError(
            f"Inverter info has no entry for device id {key} "
            f"(reported ids: {sorted(info)})"
        )
    return inverter_info_record(entry, clock())


async def fetch_meter(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> MeterData:
    response = await client.get_meter_realtime_data(device_id)
    return meter_record(response, clock())


async def fetch_storage(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> StorageData:
    response = await client.get_storage_realtime_data(device_id)
    return storage_record(response, clock())


async def fetch_ohm_pilot(
    client: FroniusClient,
    device_id: DeviceId,
    *,
    clock: Clock = time.time_ns,
) -> OhmPilotData:
    response = await client.get_ohm_pilot_realtime_data(device_id)
    return ohm_pilot_record(response, clock())


async def fetch_power_flow(
    client: FroniusClient,
    *,
    clock: Clock = time.time_ns,
) -> PowerFlowData:
    response = await client.get_power_flow_realtime_data()
    return power_flow_record(response, clock())
