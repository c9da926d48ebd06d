"""Metric/imperial conversions used by reports and change detection.

The backend reports odometer in metres, range in kilometres and
temperatures in Celsius.
"""

from __future__ import annotations

METERS_PER_MILE = 1609.0
METERS_PER_KILOMETER = 1000.0


def meters_to_distance_units(meters: float, metric: bool = False) -> float:
    return meters / METERS_PER_KILOMETER if metric else meters / METERS_PER_MILE


def kilometers_to_distance_units(kilometers: float, metric: bool = False) -> float:
    return kilometers if metric else (kilometers * METERS_PER_KILOMETER) / METERS_PER_MILE


def celsius_to_temp_units(celsius: float, metric: bool = False) -> float:
    return celsius if metric else (celsius * 9 / 5) + 32


def round_display(value: float) -> float:
    """Round to the one decimal place every report uses."""
    return round(float(value), 1)


def distance_label(metric: bool = False) -> str:
    return "km" if metric else "mi"


def speed_label(metric: bool = False) -> str:
    return "kph" if metric else "mph"


def temperature_label(metric: bool = False) -> str:
    return "C" if metric else "F"
