"""Human-readable output: poll lines, vehicle state, orders and vehicles."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TextIO

from pyrivian.config import PollConfig
from pyrivian.models.order import VehicleDetails, VehicleOrder
from pyrivian.models.vehicle_state import SignalValue, VehicleSnapshot, reading
from pyrivian.polling.change import PollSummary
from pyrivian.units import (
    celsius_to_temp_units,
    distance_label,
    kilometers_to_distance_units,
    meters_to_distance_units,
    round_display,
    speed_label,
    temperature_label,
)

TIMESTAMP_FORMAT = "%m/%d/%Y, %H:%M:%S %p %Z"


def format_timestamp(at: datetime) -> str:
    return at.strftime(TIMESTAMP_FORMAT).strip()


def format_charge_time(minutes: int) -> str:
    return f"{minutes // 60}h{minutes % 60}m"


class CsvPollReporter:
    """Writes one comma-separated line per reported sample."""

    def __init__(self, stream: TextIO | None = None, *, metric: bool = False, privacy: bool = False) -> None:
        self._stream = stream
        self._metric = metric
        self._privacy = privacy

    def _write(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)

    def begin(self, config: PollConfig) -> None:
        if not config.single_shot:
            self._write(
                f"Polling car every {config.poll_frequency:g} seconds, only showing changes in data."
            )
            if config.long_pause_enabled:
                self._write(
                    f"If 'ready' and inactive for {config.inactivity_wait / 60:g} minutes will pause polling "
                    f"once for every ready state cycle for {config.sleep_wait / 60:g} minutes to allow the "
                    "car to go to sleep."
                )
            self._write("")
        lat_long = "" if self._privacy else "Latitude,Longitude,"
        self._write(
            "timestamp,Power,Drive Mode,Gear,Mileage,Battery,Range,Speed,"
            f"{lat_long}Charger Status,Charge State,Battery Limit,Charge End"
        )

    def format_line(self, at: datetime, summary: PollSummary) -> str:
        fields: list[Any] = [
            format_timestamp(at),
            summary.power_state,
            summary.drive_mode,
            summary.gear_status,
            summary.mileage,
            f"{summary.battery_level}%",
            summary.range,
            f"{summary.speed} {speed_label(self._metric)}",
        ]
        if not self._privacy:
            fields += [summary.latitude, summary.longitude]
        if summary.charger_status is not None:
            fields += [
                summary.charger_status,
                summary.charger_state,
                f"{summary.battery_limit}%" if summary.battery_limit is not None else "",
                format_charge_time(summary.time_to_end_of_charge)
                if summary.time_to_end_of_charge is not None
                else "",
            ]
        return ",".join("" if f is None else str(f) for f in fields)

    def report(self, at: datetime, summary: PollSummary) -> None:
        self._write(self.format_line(at, summary))

    def notice(self, at: datetime, message: str) -> None:
        self._write(f"{format_timestamp(at)} {message}")


# ------------------------------------------------------------------
# Full vehicle state
# ------------------------------------------------------------------

_Row = tuple[str, str, Callable[[SignalValue], Any]]

LOCAL_TIME_FORMAT = "%m/%d/%Y, %H:%M%p %Z"


def _raw(signal: SignalValue) -> Any:
    return signal.value


def _is(expected: str) -> Callable[[SignalValue], bool]:
    return lambda signal: signal.value == expected


def _local_time(signal: SignalValue) -> str | None:
    if signal.time_stamp is None:
        return None
    return signal.time_stamp.astimezone().strftime(LOCAL_TIME_FORMAT)


_LOCKED = _is("locked")
_CLOSED = _is("closed")
_ON = _is("On")

_SECTIONS: tuple[tuple[str, tuple[_Row, ...]], ...] = (
    (
        "OTA",
        (
            ("Current Version", "otaCurrentVersion", _raw),
            ("Available version", "otaAvailableVersion", _raw),
            ("Status", "otaStatus", _raw),
            ("Install type", "otaInstallType", _raw),
            ("Duration", "otaInstallDuration", _raw),
            ("Download progress", "otaDownloadProgress", _raw),
            ("Install ready", "otaInstallReady", _raw),
            ("Install progress", "otaInstallProgress", _raw),
            ("Install time", "otaInstallTime", _raw),
            ("Current Status", "otaCurrentStatus", _raw),
        ),
    ),
    (
        "Security",
        (
            ("Alarm active", "alarmSoundStatus", _raw),
            ("Gear Guard Video", "gearGuardVideoStatus", _raw),
            ("Gear Guard Mode", "gearGuardVideoMode", _raw),
            ("Last Alarm", "alarmSoundStatus", _local_time),
            ("Gear Guard Locked", "gearGuardLocked", _LOCKED),
        ),
    ),
    (
        "Doors",
        (
            ("Front left locked", "doorFrontLeftLocked", _LOCKED),
            ("Front left closed", "doorFrontLeftClosed", _CLOSED),
            ("Front right locked", "doorFrontRightLocked", _LOCKED),
            ("Front right closed", "doorFrontRightClosed", _CLOSED),
            ("Rear left locked", "doorRearLeftLocked", _LOCKED),
            ("Rear left closed", "doorRearLeftClosed", _CLOSED),
            ("Rear right locked", "doorRearRightLocked", _LOCKED),
            ("Rear right closed", "doorRearRightClosed", _CLOSED),
        ),
    ),
    (
        "Windows",
        (
            ("Front left closed", "windowFrontLeftClosed", _CLOSED),
            ("Front right closed", "windowFrontRightClosed", _CLOSED),
            ("Rear left closed", "windowRearLeftClosed", _CLOSED),
            ("Rear right closed", "windowRearRightClosed", _CLOSED),
        ),
    ),
    (
        "Seats",
        (
            ("Front left Heat", "seatFrontLeftHeat", _ON),
            ("Front right Heat", "seatFrontRightHeat", _ON),
            ("Rear left Heat", "seatRearLeftHeat", _ON),
            ("Rear right Heat", "seatRearRightHeat", _ON),
        ),
    ),
    (
        "Storage",
        (
            ("Frunk locked", "closureFrunkLocked", _LOCKED),
            ("Frunk closed", "closureFrunkClosed", _CLOSED),
            ("Lift Gate Locked", "closureLiftgateLocked", _LOCKED),
            ("Lift Gate Closed", "closureLiftgateClosed", _raw),
            ("Tonneau Locked", "closureTonneauLocked", _raw),
            ("Tonneau Closed", "closureTonneauClosed", _raw),
        ),
    ),
    (
        "Maintenance",
        (
            ("Wiper Fluid", "wiperFluidState", _raw),
            ("Tire pressure front left", "tirePressureStatusFrontLeft", _raw),
            ("Tire pressure front right", "tirePressureStatusFrontRight", _raw),
            ("Tire pressure rear left", "tirePressureStatusRearLeft", _raw),
            ("Tire pressure rear right", "tirePressureStatusRearRight", _raw),
        ),
    ),
)


def format_vehicle_state(snapshot: VehicleSnapshot, *, metric: bool = False, privacy: bool = False) -> list[str]:
    """Render a full-tier snapshot as indented report lines.

    Signals absent from the snapshot are skipped rather than printed.
    """
    units = distance_label(metric)
    lines = [
        "Vehicle State:",
        f"Power State: {snapshot.power}",
        f"Drive Mode: {reading(snapshot.drive_mode)}",
        f"Gear Status: {reading(snapshot.gear_status)}",
    ]
    last_sync = snapshot.cloud_connection.last_sync if snapshot.cloud_connection is not None else None
    if last_sync is not None:
        lines.append(f"Last Cloud Sync: {last_sync.astimezone().strftime(LOCAL_TIME_FORMAT)}")
    mileage = snapshot.mileage_meters
    if mileage is not None:
        lines.append(f"Odometer: {round_display(meters_to_distance_units(mileage, metric))} {units}")
    location = snapshot.gnss_location
    if not privacy and location is not None:
        lines.append(f"Location: {location.latitude},{location.longitude}")

    lines.append("Battery:")
    battery_level = reading(snapshot.battery_level)
    if battery_level is not None:
        lines.append(f"   Battery Level: {round_display(battery_level)}%")
    range_km = reading(snapshot.distance_to_empty)
    if range_km is not None:
        lines.append(f"   Range: {round_display(kilometers_to_distance_units(range_km, metric))} {units}")
    limit = reading(snapshot.battery_limit)
    if limit is not None:
        lines.append(f"   Battery Limit: {round_display(limit)}%")
    for label, signal in (
        ("Charging state", snapshot.charger_state),
        ("Charger status", snapshot.charger_status),
    ):
        value = reading(signal)
        if value is not None:
            lines.append(f"   {label}: {value}")
    time_to_end = reading(snapshot.time_to_end_of_charge)
    if time_to_end is not None:
        lines.append(f"   Time to end of charge: {format_charge_time(int(time_to_end))}")

    lines.append("Climate:")
    for label, name in (
        ("Climate Interior Temp", "cabinClimateInteriorTemperature"),
        ("Climate Driver Temp", "cabinClimateDriverTemperature"),
    ):
        value = snapshot.value(name)
        if value is not None:
            lines.append(f"   {label}: {celsius_to_temp_units(value, metric):g}º{temperature_label(metric)}")
    for label, name in (
        ("Cabin Preconditioning Status", "cabinPreconditioningStatus"),
        ("Cabin Preconditioning Type", "cabinPreconditioningType"),
        ("Defrost", "defrostDefogStatus"),
        ("Steering Wheel Heat", "steeringWheelHeat"),
        ("Pet Mode", "petModeStatus"),
    ):
        value = snapshot.value(name)
        if value is not None:
            lines.append(f"   {label}: {value}")

    for title, rows in _SECTIONS:
        lines.append(f"{title}:")
        for label, name, render in rows:
            signal = snapshot.signal(name)
            if signal is None or signal.value is None:
                continue
            rendered = render(signal)
            if rendered is not None:
                lines.append(f"   {label}: {rendered}")
    return lines


# ------------------------------------------------------------------
# Orders and vehicles
# ------------------------------------------------------------------


def _mask(value: str, keep: int = 4) -> str:
    return "xxxx" + value[-keep:]


def format_orders(orders: Iterable[VehicleOrder], *, privacy: bool = False) -> list[str]:
    orders = list(orders)
    if not orders:
        return ["No Vehicle Orders found"]
    lines = ["Vehicle Orders:"]
    for order in orders:
        lines += [
            f"Order ID: {_mask(order.id) if privacy else order.id}",
            f"Order Date: {order.order_date[:10] if privacy else order.order_date}",
            f"Config State: {order.configuration_status}",
            f"Order State: {order.state}",
            f"Status: {order.fulfillment_summary_status}",
            f"Item: {order.items[0] if order.items else ''}",
            f"Customer flow complete: {'Yes' if order.is_consumer_flow_complete else 'No'}",
            "",
        ]
    return lines


def format_vehicles(vehicles: Iterable[VehicleDetails], *, privacy: bool = False) -> list[str]:
    vehicles = list(vehicles)
    if not vehicles:
        return ["No Vehicles found"]
    lines = ["Vehicles:"]
    for vehicle in vehicles:
        for name, value in vehicle.as_display_dict().items():
            if privacy and name == "vin" and value:
                value = _mask(str(value))
            lines.append(f"{name}: {value}")
        lines.append("")
    return lines
