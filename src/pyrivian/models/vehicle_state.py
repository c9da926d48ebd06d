"""Live vehicle state snapshot model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import Field
from pydantic.alias_generators import to_snake

from pyrivian.models._base import RivianBaseModel


class FieldSetTier(enum.StrEnum):
    """Which set of signals a vehicle state query asks for."""

    MINIMAL = "minimal"
    FULL = "full"


class SignalValue(RivianBaseModel):
    """A single telemetry signal: its value and when it last changed."""

    value: Any = None
    time_stamp: datetime | None = None


class NumericSignal(RivianBaseModel):
    """A signal whose value must be a number (odometer, charge, range)."""

    value: float | None = None
    time_stamp: datetime | None = None


class GnssLocation(RivianBaseModel):
    """GNSS fix of the vehicle."""

    latitude: float | None = None
    longitude: float | None = None
    time_stamp: datetime | None = None


class CloudConnection(RivianBaseModel):
    """Last time the vehicle synced with the cloud."""

    last_sync: datetime | None = None


#: Signals the poll loop cannot summarise without.
REQUIRED_SIGNALS: tuple[str, ...] = (
    "powerState",
    "driveMode",
    "gearStatus",
    "vehicleMileage",
    "batteryLevel",
    "distanceToEmpty",
)


class VehicleSnapshot(RivianBaseModel):
    """One point-in-time read of ``vehicleState``.

    The minimal-tier signals are typed fields, numeric ones as
    :class:`NumericSignal` so a non-number fails validation. Every other
    signal of the full tier is reachable through :meth:`signal` /
    :meth:`value` from the original record kept in ``raw``.

    Units as sent by the backend: ``vehicle_mileage`` in metres,
    ``distance_to_empty`` in kilometres, ``battery_level`` and
    ``battery_limit`` in percent, ``time_to_end_of_charge`` in minutes.
    """

    cloud_connection: CloudConnection | None = None
    power_state: SignalValue | None = None
    drive_mode: SignalValue | None = None
    gear_status: SignalValue | None = None
    vehicle_mileage: NumericSignal | None = None
    battery_level: NumericSignal | None = None
    distance_to_empty: NumericSignal | None = None
    gnss_location: GnssLocation | None = None
    charger_status: SignalValue | None = None
    charger_state: SignalValue | None = None
    battery_limit: NumericSignal | None = None
    time_to_end_of_charge: NumericSignal | None = None
    fetched_at: datetime | None = Field(default=None, exclude=True)

    def signal(self, name: str) -> SignalValue | None:
        """Return any signal by its GraphQL name (``"otaStatus"`` etc.)."""
        record = self.raw.get(name)
        if not isinstance(record, dict):
            return None
        return SignalValue.model_validate(record)

    def value(self, name: str, default: Any = None) -> Any:
        """Return the ``value`` of a signal, or *default* when absent."""
        sig = self.signal(name)
        if sig is None or sig.value is None:
            return default
        return sig.value

    def missing_signals(self) -> list[str]:
        """Names of :data:`REQUIRED_SIGNALS` with no value in this snapshot."""
        return [name for name in REQUIRED_SIGNALS if reading(getattr(self, to_snake(name))) is None]

    @property
    def power(self) -> str | None:
        return reading(self.power_state)

    @property
    def mileage_meters(self) -> float | None:
        return reading(self.vehicle_mileage)


def reading(signal: SignalValue | NumericSignal | None) -> Any:
    """Value of a typed signal field, ``None`` when the signal is absent."""
    return signal.value if signal is not None else None
