"""
Unit tests for the metric record models.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import pytest
from fronius_edge.src.models import (
    InverterData,
    InverterInfo,
    InverterPhaseData,
    MeterData,
    OhmPilotData,
    PowerFlowData,
    StorageData,
)
from pydantic import BaseModel, ValidationError

_TS = 1_781_600_000_000_000_000


class TestRecordShape:
    @pytest.mark.parametrize(
        ("model", "measurement", "device"),
        [
            (InverterData, "inverter", "Inverter"),
            (InverterPhaseData, "inverter_phase", "Inverter"),
            (InverterInfo, "inverter_info", "Inverter"),
            (MeterData, "meter", "Meter"),
            (StorageData, "storage", "Storage"),
            (OhmPilotData, "ohm_pilot", "OhmPilot"),
            (PowerFlowData, "power_flow", "Unknown"),
        ],
    )
    def test_measurement_and_device_tag(
        self, model: type[BaseModel], measurement: str, device: str
    ) -> None:
        assert model.measurement == measurement  # type: ignore[attr-defined]
        assert model.model_fields["device"].default == device

    def test_records_are_frozen(self) -> None:
        record = InverterData(ac_power=1.0, time=_TS)

        with pytest.raises(ValidationError):
            record.ac_power = 2.0  # type: ignore[misc]


class TestTagsAndFields:
    def test_tags_only_device(self) -> None:
        record = MeterData(power=10.0, frequency_average=50.0, time=_TS)

        assert record.tags() == {"device": "Meter"}

    def test_fields_exclude_tags_time_and_absent_values(self) -> None:
        record = PowerFlowData(photovoltaik=0.0, grid=-12.5, time=_TS)

        assert record.fields() == {"grid": -12.5, "photovoltaik": 0.0}

    def test_zero_values_are_kept(self) -> None:
        record = StorageData(
            enabled=False,
            charge_percentage=0.0,
            capacity=0.0,
            dc_current=0.0,
            dc_voltage=0.0,
            temperature_cell=0.0,
            time=_TS,
        )

        fields = record.fields()

        assert fields["enabled"] is False
        assert fields["charge_percentage"] == 0.0
        assert len(fields) == 6

    def test_inverter_info_field_types(self) -> None:
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

        fields = record.fields()

        assert fields["device_type"] == 1
        assert isinstance(fields["pv_power"], int)
        assert fields["status_code"] == "7"
        assert fields["is_visualized"] is True

    def test_ohm_pilot_error_code_default(self) -> None:
        record = OhmPilotData(state="0", power=0.0, temperature=20.0, time=_TS)

        assert record.error_code == 0
