"""
Validated device identifiers for the Fronius Solar API.

The Solar API selects a device instance within a category with the
``DeviceId`` query parameter. Inverters are numbered 0-99 on the Fronius
Datamanager bus; meters, storages and Ohmpilots use the wider 0-65535 range.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fronius_edge.src.errors import InvalidDeviceIdError


class DeviceClass(str, Enum):
    """Physical device category addressed by a :class:`DeviceId`."""

    INVERTER = "inverter"
    METER = "meter"
    STORAGE = "storage"
    OHM_PILOT = "ohm_pilot"


_VALID_RANGES: dict[DeviceClass, tuple[int, int]] = {
    DeviceClass.INVERTER: (0, 99),
    DeviceClass.METER: (0, 65535),
    DeviceClass.STORAGE: (0, 65535),
    DeviceClass.OHM_PILOT: (0, 65535),
}


@dataclass(frozen=True)
class DeviceId:
    """A device number validated against its device class range.

    Args:
        device_class: The category the number refers to.
        number: The device number as used in the ``DeviceId`` query parameter.

    Raises:
        InvalidDeviceIdError: If *number* is outside the valid range.
    """

    device_class: DeviceClass
    number: int

    def __post_init__(self) -> None:
        lo, hi = _VALID_RANGES[self.device_class]
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise InvalidDeviceIdError(
                f"{self.device_class.value} device id must be an integer "
                f"(got: {self.number!r})"
            )
        if not lo <= self.number <= hi:
            raise InvalidDeviceIdError(
                f"{self.device_class.value} device id must be between "
                f"{lo} and {hi} (got: {self.number})"
            )

    def __str__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class DeviceIds:
    """The device instances queried every cycle."""

    inverter: DeviceId
    meter: DeviceId
    storage: DeviceId
    ohm_pilot: DeviceId

    @classmethod
    def from_numbers(
        cls,
        *,
        inverter: int = 1,
        meter: int = 0,
        storage: int = 0,
        ohm_pilot: int = 0,
    ) -> DeviceIds:
        """Build the bundle from plain numbers, validating each against its class."""
        return cls(
            inverter=DeviceId(DeviceClass.INVERTER, inverter),
            meter=DeviceId(DeviceClass.METER, meter),
            storage=DeviceId(DeviceClass.STORAGE, storage),
            ohm_pilot=DeviceId(DeviceClass.OHM_PILOT, ohm_pilot),
        )
