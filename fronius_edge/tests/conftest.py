"""
Shared test fixtures for collector tests.

Provides environment variable fixtures for the settings classes and a set of
realistic Solar API payloads (``Body.Data`` contents) captured from a Fronius
Symo GEN24 with BYD battery, smart meter and Ohmpilot. All collector env vars
are cleaned before each test to ensure isolation.

CHANGELOG:
- 2026-10-16: Add Solar API payload fixtures
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

# All settings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "FRONIUS_IP",
    "FRONIUS_TIMEOUT_S",
    "INVERTER_ID",
    "METER_ID",
    "STORAGE_ID",
    "OHM_PILOT_ID",
    "HEALTH_PATH",
    "LOG_LEVEL",
    "INFLUX_DB_URL",
    "INFLUX_DB_ORG",
    "INFLUX_DB_TOKEN",
    "INFLUX_DB_BUCKET",
    "INFLUX_DB_TIMEOUT_MS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all collector env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def influx_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all InfluxDB environment variables."""
    env = {
        "INFLUX_DB_URL": "http://influxdb.local:8086",
        "INFLUX_DB_ORG": "home",
        "INFLUX_DB_TOKEN": "influx-secret-token",
        "INFLUX_DB_BUCKET": "fronius",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def collector_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set only the required startup variable."""
    monkeypatch.setenv("FRONIUS_IP", "192.168.1.50")
    return {"FRONIUS_IP": "192.168.1.50"}


# ---------------------------------------------------------------------------
# Solar API payloads (Body.Data)
# ---------------------------------------------------------------------------


@pytest.fixture()
def common_inverter_data() -> dict[str, Any]:
    return {
        "DAY_ENERGY": {"Unit": "Wh", "Value": 8123.0},
        "FAC": {"Unit": "Hz", "Value": 49.98},
        "IAC": {"Unit": "A", "Value": 4.12},
        "IDC": {"Unit": "A", "Value": 3.05},
        "PAC": {"Unit": "W", "Value": 2875},
        "SAC": {"Unit": "VA", "Value": 2890.5},
        "TOTAL_ENERGY": {"Unit": "Wh", "Value": 18765432.0},
        "UAC": {"Unit": "V", "Value": 231.4},
        "UDC": {"Unit": "V", "Value": 612.7},
        "DeviceStatus": {"StatusCode": 7, "ErrorCode": 0},
    }


@pytest.fixture()
def three_phase_inverter_data() -> dict[str, Any]:
    return {
        "IAC_L1": {"Unit": "A", "Value": 4.1},
        "IAC_L2": {"Unit": "A", "Value": 4.2},
        "IAC_L3": {"Unit": "A", "Value": 4.0},
        "UAC_L1": {"Unit": "V", "Value": 230.9},
        "UAC_L2": {"Unit": "V", "Value": 232.1},
        "UAC_L3": {"Unit": "V", "Value": 231.0},
    }


@pytest.fixture()
def inverter_info_data() -> dict[str, Any]:
    return {
        "1": {
            "CustomName": "Symo GEN24",
            "DT": 1,
            "ErrorCode": 0,
            "InverterState": "Running",
            "PVPower": 8000,
            "Show": 1,
            "StatusCode": 7,
            "UniqueID": "34567890",
        }
    }


@pytest.fixture()
def meter_data() -> dict[str, Any]:
    return {
        "Current_AC_Phase_1": 1.5,
        "Current_AC_Phase_2": 1.25,
        "Current_AC_Phase_3": 0.75,
        "Current_AC_Sum": 3.5,
        "Enable": 1,
        "Frequency_Phase_Average": 50.01,
        "PowerReal_P_Phase_1": 310.2,
        "PowerReal_P_Phase_2": -120.0,
        "PowerReal_P_Phase_3": 95.5,
        "PowerReal_P_Sum": 285.7,
        "Voltage_AC_PhaseToPhase_12": 400.1,
        "Voltage_AC_PhaseToPhase_23": 401.3,
        "Voltage_AC_PhaseToPhase_31": 399.8,
        "Voltage_AC_Phase_1": 231.0,
        "Voltage_AC_Phase_2": 232.0,
        "Voltage_AC_Phase_3": 230.5,
        "Visible": 1,
    }


@pytest.fixture()
def storage_data() -> dict[str, Any]:
    return {
        "Controller": {
            "Capacity_Maximum": 10240,
            "Current_DC": -2.5,
            "DesignedCapacity": 10240,
            "Enable": 1,
            "StateOfCharge_Relative": 64.5,
            "Temperature_Cell": 21.5,
            "Voltage_DC": 412.3,
            "Details": {"Manufacturer": "BYD", "Model": "BYD Battery-Box Premium HV"},
        },
        "Modules": [],
    }


@pytest.fixture()
def ohm_pilot_data() -> dict[str, Any]:
    return {
        "CodeOfState": 2,
        "Details": {"Manufacturer": "Fronius", "Model": "Ohmpilot"},
        "EnergyReal_WAC_Sum_Consumed": 2964307,
        "PowerReal_PAC_Sum": 1785.0,
        "Temperature_Channel_1": 48.5,
    }


@pytest.fixture()
def power_flow_data() -> dict[str, Any]:
    return {
        "Inverters": {"1": {"DT": 1, "P": 2875, "SOC": 64.5}},
        "Site": {
            "Mode": "bidirectional",
            "P_Akku": -1000.5,
            "P_Grid": 285.7,
            "P_Load": -2161.2,
            "P_PV": 3875.0,
            "rel_Autonomy": 86.8,
            "rel_SelfConsumption": 100.0,
        },
        "Version": "12",
    }


def _envelope(data: Any, *, code: int = 0, reason: str = "") -> dict[str, Any]:
    return {
        "Head": {
            "RequestArguments": {},
            "Status": {"Code": code, "Reason": reason, "UserMessage": ""},
            "Timestamp": "2026-10-16T12:00:00+02:00",
        },
        "Body": {"Data": data},
    }


@pytest.fixture()
def envelope() -> Callable[..., dict[str, Any]]:
    """Return a helper that wraps Body.Data in a Solar API response envelope."""
    return _envelope
