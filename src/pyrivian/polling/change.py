"""Change detection over vehicle snapshots.

A snapshot is reduced to a :class:`PollSummary`: the fields an operator
watches, converted to display units and rounded to one decimal so
sensor noise below that resolution never counts as a change. Signal
timestamps are deliberately not part of the summary.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from pyrivian.models.vehicle_state import VehicleSnapshot, reading
from pyrivian.units import kilometers_to_distance_units, meters_to_distance_units, round_display


class PollSummary(NamedTuple):
    power_state: str | None
    drive_mode: str | None
    gear_status: str | None
    mileage: float
    battery_level: float
    range: float
    speed: float
    latitude: float | None = None
    longitude: float | None = None
    charger_status: str | None = None
    charger_state: str | None = None
    battery_limit: float | None = None
    time_to_end_of_charge: int | None = None


def compute_speed(
    current_mileage: float,
    last_mileage: float | None,
    elapsed_seconds: float | None,
    *,
    metric: bool = False,
) -> float:
    """Average speed since the previous sample, in mph or kph.

    Uses the same metre conversion as the odometer column, so displayed
    speed agrees with displayed mileage deltas. Zero when there is no
    previous sample or no time has elapsed.
    """
    if last_mileage is None or elapsed_seconds is None or elapsed_seconds <= 0:
        return 0.0
    distance = meters_to_distance_units(current_mileage - last_mileage, metric)
    return distance * (3600 / elapsed_seconds)


def _rounded(value: Any) -> float | None:
    return round_display(value) if value is not None else None


def summarize(
    snapshot: VehicleSnapshot,
    speed: float = 0.0,
    *,
    metric: bool = False,
    privacy: bool = False,
) -> PollSummary:
    """Project *snapshot* onto the comparable poll summary."""
    latitude = longitude = None
    if not privacy and snapshot.gnss_location is not None:
        latitude = snapshot.gnss_location.latitude
        longitude = snapshot.gnss_location.longitude

    charger: tuple[Any, ...] = (None, None, None, None)
    if reading(snapshot.charger_status) is not None:
        time_to_end = reading(snapshot.time_to_end_of_charge)
        charger = (
            reading(snapshot.charger_status),
            reading(snapshot.charger_state),
            _rounded(reading(snapshot.battery_limit)),
            int(time_to_end) if time_to_end is not None else None,
        )

    return PollSummary(
        reading(snapshot.power_state),
        reading(snapshot.drive_mode),
        reading(snapshot.gear_status),
        round_display(meters_to_distance_units(reading(snapshot.vehicle_mileage), metric)),
        round_display(reading(snapshot.battery_level)),
        round_display(kilometers_to_distance_units(reading(snapshot.distance_to_empty), metric)),
        round_display(speed),
        latitude,
        longitude,
        *charger,
    )


def differs(previous: PollSummary | None, current: PollSummary) -> bool:
    """Whether *current* should be reported as a change."""
    return previous is None or previous != current
