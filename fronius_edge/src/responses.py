"""
Pydantic models for Fronius Solar API v1 response bodies.

Only the attributes consumed by the normalizer are declared; everything else
in the ``Body.Data`` payload is ignored. Attribute names follow the Solar API
JSON keys through aliases so the models validate raw device JSON directly.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_ALIASED = ConfigDict(populate_by_name=True, extra="ignore")


class ApiVersion(BaseModel):
    """Response of ``/solar_api/GetAPIVersion.cgi`` (not wrapped in an envelope)."""

    model_config = _ALIASED

    api_version: int = Field(alias="APIVersion")
    base_url: str = Field(default="/solar_api/v1/", alias="BaseURL")
    compatibility_range: str | None = Field(default=None, alias="CompatibilityRange")


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------


class ResponseStatus(BaseModel):
    model_config = _ALIASED

    code: int = Field(alias="Code")
    reason: str = Field(default="", alias="Reason")
    user_message: str = Field(default="", alias="UserMessage")


class ResponseHead(BaseModel):
    model_config = _ALIASED

    status: ResponseStatus = Field(alias="Status")
    timestamp: str | None = Field(default=None, alias="Timestamp")


# ---------------------------------------------------------------------------
# Inverter
# ---------------------------------------------------------------------------


class UnitValue(BaseModel):
    """A ``{"Value": ..., "Unit": ...}`` pair. ``Value`` may be missing or null."""

    model_config = _ALIASED

    value: float | None = Field(default=None, alias="Value")
    unit: str | None = Field(default=None, alias="Unit")


class CommonInverterData(BaseModel):
    """``GetInverterRealtimeData`` with ``DataCollection=CommonInverterData``.

    At night the device omits most quantities, so every entry defaults to an
    empty :class:`UnitValue`. ``FAC`` is additionally allowed to be absent.
    """

    model_config = _ALIASED

    pac: UnitValue = Field(default_factory=UnitValue, alias="PAC")
    sac: UnitValue = Field(default_factory=UnitValue, alias="SAC")
    iac: UnitValue = Field(default_factory=UnitValue, alias="IAC")
    uac: UnitValue = Field(default_factory=UnitValue, alias="UAC")
    fac: UnitValue | None = Field(default=None, alias="FAC")
    idc: UnitValue = Field(default_factory=UnitValue, alias="IDC")
    udc: UnitValue = Field(default_factory=UnitValue, alias="UDC")
    total_energy: UnitValue = Field(default_factory=UnitValue, alias="TOTAL_ENERGY")


class ThreePhaseInverterData(BaseModel):
    """``GetInverterRealtimeData`` with ``DataCollection=3PInverterData``."""

    model_config = _ALIASED

    iac_l1: UnitValue = Field(default_factory=UnitValue, alias="IAC_L1")
    iac_l2: UnitValue = Field(default_factory=UnitValue, alias="IAC_L2")
    iac_l3: UnitValue = Field(default_factory=UnitValue, alias="IAC_L3")
    uac_l1: UnitValue = Field(default_factory=UnitValue, alias="UAC_L1")
    uac_l2: UnitValue = Field(default_factory=UnitValue, alias="UAC_L2")
    uac_l3: UnitValue = Field(default_factory=UnitValue, alias="UAC_L3")


class InverterInfoEntry(BaseModel):
    """One value of the ``GetInverterInfo`` map (keyed by device id string)."""

    model_config = _ALIASED

    dt: int = Field(alias="DT")
    pv_power: int = Field(alias="PVPower")
    custom_name: str = Field(alias="CustomName")
    show: int = Field(alias="Show")
    unique_id: str = Field(alias="UniqueID")
    error_code: int = Field(alias="ErrorCode")
    status_code: int = Field(alias="StatusCode")
    inverter_state: str = Field(alias="InverterState")


# ---------------------------------------------------------------------------
# Meter, storage, Ohmpilot
# ---------------------------------------------------------------------------


class MeterRealtimeData(BaseModel):
    """``GetMeterRealtimeData`` for a single meter."""

    model_config = _ALIASED

    current_ac_phase_1: float | None = Field(default=None, alias="Current_AC_Phase_1")
    current_ac_phase_2: float | None = Field(default=None, alias="Current_AC_Phase_2")
    current_ac_phase_3: float | None = Field(default=None, alias="Current_AC_Phase_3")
    current_ac_sum: float | None = Field(default=None, alias="Current_AC_Sum")
    voltage_ac_phase_1: float | None = Field(default=None, alias="Voltage_AC_Phase_1")
    voltage_ac_phase_2: float | None = Field(default=None, alias="Voltage_AC_Phase_2")
    voltage_ac_phase_3: float | None = Field(default=None, alias="Voltage_AC_Phase_3")
    voltage_ac_phase_to_phase_12: float | None = Field(
        default=None, alias="Voltage_AC_PhaseToPhase_12"
    )
    voltage_ac_phase_to_phase_23: float | None = Field(
        default=None, alias="Voltage_AC_PhaseToPhase_23"
    )
    voltage_ac_phase_to_phase_31: float | None = Field(
        default=None, alias="Voltage_AC_PhaseToPhase_31"
    )
    power_real_p_phase_1: float | None = Field(default=None, alias="PowerReal_P_Phase_1")
    power_real_p_phase_2: float | None = Field(default=None, alias="PowerReal_P_Phase_2")
    power_real_p_phase_3: float | None = Field(default=None, alias="PowerReal_P_Phase_3")
    power_real_p_sum: float = Field(alias="PowerReal_P_Sum")
    frequency_phase_average: float = Field(alias="Frequency_Phase_Average")


class StorageController(BaseModel):
    model_config = _ALIASED

    enable: int = Field(alias="Enable")
    state_of_charge_relative: float = Field(alias="StateOfCharge_Relative")
    capacity_maximum: float = Field(alias="Capacity_Maximum")
    current_dc: float = Field(alias="Current_DC")
    voltage_dc: float = Field(alias="Voltage_DC")
    temperature_cell: float = Field(alias="Temperature_Cell")


class StorageRealtimeData(BaseModel):
    """``GetStorageRealtimeData`` for a single storage."""

    model_config = _ALIASED

    controller: StorageController = Field(alias="Controller")


class OhmPilotRealtimeData(BaseModel):
    """``GetOhmPilotRealtimeData`` for a single Ohmpilot."""

    model_config = _ALIASED

    code_of_state: int = Field(alias="CodeOfState")
    code_of_error: int | None = Field(default=None, alias="CodeOfError")
    power_real_pac_sum: float = Field(alias="PowerReal_PAC_Sum")
    temperature_channel_1: float = Field(alias="Temperature_Channel_1")


# ---------------------------------------------------------------------------
# Power flow
# ---------------------------------------------------------------------------


class PowerFlowSite(BaseModel):
    model_config = _ALIASED

    p_akku: float | None = Field(default=None, alias="P_Akku")
    p_grid: float | None = Field(default=None, alias="P_Grid")
    p_load: float | None = Field(default=None, alias="P_Load")
    p_pv: float = Field(alias="P_PV")
    rel_autonomy: float | None = Field(default=None, alias="rel_Autonomy")
    rel_self_consumption: float | None = Field(default=None, alias="rel_SelfConsumption")


class PowerFlowRealtimeData(BaseModel):
    """``GetPowerFlowRealtimeData``."""

    model_config = _ALIASED

    site: PowerFlowSite = Field(alias="Site")
