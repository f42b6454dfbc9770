"""
Pydantic models for normalized Fronius metric records.

One frozen model per data category. Each record carries a single ``device``
tag, a fixed set of fields, and a ``time`` in integer nanoseconds since the
Unix epoch. Optional fields are ``None`` when the device did not report them
for the cycle; they are dropped from :meth:`fields` so that the sink never
writes a substituted value.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

FieldValue = float | int | str | bool


class _MetricRecord(BaseModel):
    """Shared tag/field accessors for the record types below."""

    model_config = ConfigDict(frozen=True)

    measurement: ClassVar[str]
    tag_names: ClassVar[tuple[str, ...]] = ("device",)

    device: str
    time: int

    def tags(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in self.tag_names}

    def fields(self) -> dict[str, FieldValue]:
        """Return the field set with absent optional values removed."""
        excluded = {*self.tag_names, "time"}
        return {
            name: value
            for name, value in self.model_dump(exclude=excluded).items()
            if value is not None
        }


class InverterData(_MetricRecord):
    """Common inverter readings (AC/DC electrical values and lifetime energy)."""

    measurement: ClassVar[str] = "inverter"

    device: str = "Inverter"
    ac_power: float | None = None
    ac_power_abs: float | None = None
    ac_current: float | None = None
    ac_voltage: float | None = None
    ac_frequency: float | None = None
    dc_current: float | None = None
    dc_voltage: float | None = None
    total_energy: float | None = None


class InverterPhaseData(_MetricRecord):
    """Per-phase inverter readings.

    The ``dc_l*_voltage`` names are kept for continuity with the stored
    series; the values are the per-phase AC voltages (``UAC_L1..3``).
    """

    measurement: ClassVar[str] = "inverter_phase"

    device: str = "Inverter"
    ac_l1_current: float | None = None
    ac_l2_current: float | None = None
    ac_l3_current: float | None = None
    dc_l1_voltage: float | None = None
    dc_l2_voltage: float | None = None
    dc_l3_voltage: float | None = None


class InverterInfo(_MetricRecord):
    """Inverter identity and status as reported by ``GetInverterInfo``."""

    measurement: ClassVar[str] = "inverter_info"

    device: str = "Inverter"
    device_type: int
    pv_power: int
    name: str
    is_visualized: bool
    id: str
    error_code: int
    status_code: str
    state: str


class MeterData(_MetricRecord):
    """Grid meter readings."""

    measurement: ClassVar[str] = "meter"

    device: str = "Meter"
    l1_current: float | None = None
    l2_current: float | None = None
    l3_current: float | None = None
    current: float | None = None
    l1_voltage: float | None = None
    l2_voltage: float | None = None
    l3_voltage: float | None = None
    l12_voltage: float | None = None
    l23_voltage: float | None = None
    l31_voltage: float | None = None
    l1_power: float | None = None
    l2_power: float | None = None
    l3_power: float | None = None
    power: float
    frequency_average: float


class StorageData(_MetricRecord):
    """Battery storage controller state."""

    measurement: ClassVar[str] = "storage"

    device: str = "Storage"
    enabled: bool
    charge_percentage: float
    capacity: float
    dc_current: float
    dc_voltage: float
    temperature_cell: float


class OhmPilotData(_MetricRecord):
    """Ohmpilot heating element state."""

    measurement: ClassVar[str] = "ohm_pilot"

    device: str = "OhmPilot"
    state: str
    error_code: int = 0
    power: float
    temperature: float


class PowerFlowData(_MetricRecord):
    """Site-wide power flow summary. Not scoped to a physical device."""

    measurement: ClassVar[str] = "power_flow"

    device: str = "Unknown"
    akku: float | None = None
    grid: float | None = None
    load: float | None = None
    photovoltaik: float
    relative_autonomy: float | None = None
    relative_self_consumption: float | None = None


MetricRecord = (
    InverterData
    | InverterPhaseData
    | InverterInfo
    | MeterData
    | StorageData
    | OhmPilotData
    | PowerFlowData
)
