from __future__ import annotations

from typing import Any

import pytest

from pyrivian.polling.change import PollSummary, compute_speed, differs, summarize
from pyrivian.units import kilometers_to_distance_units, meters_to_distance_units, round_display


class TestComputeSpeed:
    def test_imperial_one_mile_per_hour(self) -> None:
        assert round_display(compute_speed(1609.0, 0.0, 3600, metric=False)) == pytest.approx(1.0)

    def test_metric_one_kilometer_per_hour(self) -> None:
        assert round_display(compute_speed(1000.0, 0.0, 3600, metric=True)) == pytest.approx(1.0)

    def test_zero_without_previous_mileage(self) -> None:
        assert compute_speed(5000.0, None, 30) == 0.0

    def test_zero_without_previous_sample_instant(self) -> None:
        assert compute_speed(5000.0, 4000.0, None) == 0.0

    def test_zero_when_no_time_elapsed(self) -> None:
        assert compute_speed(5000.0, 4000.0, 0) == 0.0

    def test_speed_matches_odometer_units(self) -> None:
        speed = compute_speed(20000.0, 10000.0, 1800, metric=False)
        assert speed == pytest.approx(meters_to_distance_units(10000.0) * 2)


@pytest.mark.parametrize("metric", [False, True])
@pytest.mark.parametrize("raw", [0.0, 12.349, 16093.44, 123456.78])
def test_rounding_pipeline_is_idempotent(raw: float, metric: bool) -> None:
    once = round_display(meters_to_distance_units(raw, metric))
    assert round_display(once) == once
    once_km = round_display(kilometers_to_distance_units(raw, metric))
    assert round_display(once_km) == once_km


def test_summarize_converts_and_rounds(make_snapshot: Any) -> None:
    summary = summarize(make_snapshot(mileage=16090.0, battery=80.04, range_km=321.8), 12.345)

    assert summary.power_state == "ready"
    assert summary.drive_mode == "everyday"
    assert summary.gear_status == "park"
    assert summary.mileage == 10.0
    assert summary.battery_level == 80.0
    assert summary.range == 200.0
    assert summary.speed == 12.3
    assert (summary.latitude, summary.longitude) == (42.0, -71.0)
    assert summary.charger_status == "chrgr_sts_not_connected"
    assert summary.charger_state == "charging_ready"
    assert summary.battery_limit == 85.0
    assert summary.time_to_end_of_charge == 80


def test_summarize_metric(make_snapshot: Any) -> None:
    summary = summarize(make_snapshot(mileage=16090.0, range_km=321.84), metric=True)

    assert summary.mileage == 16.1
    assert summary.range == 321.8


def test_summarize_privacy_drops_location(make_snapshot: Any) -> None:
    summary = summarize(make_snapshot(), privacy=True)

    assert summary.latitude is None
    assert summary.longitude is None


def test_summarize_without_charger_status(make_snapshot: Any) -> None:
    summary = summarize(make_snapshot(charger=False))

    assert summary.charger_status is None
    assert summary.charger_state is None
    assert summary.battery_limit is None
    assert summary.time_to_end_of_charge is None


def test_sub_threshold_noise_is_not_a_change(make_snapshot: Any) -> None:
    first = summarize(make_snapshot(battery=80.01, mileage=16090.0))
    second = summarize(make_snapshot(battery=80.04, mileage=16095.0))

    assert not differs(first, second)


def test_timestamps_are_not_part_of_the_summary(make_snapshot: Any) -> None:
    first = summarize(make_snapshot(timestamp="2026-01-01T00:00:00Z"))
    second = summarize(make_snapshot(timestamp="2026-01-01T00:05:00Z"))

    assert first == second


def test_differs_is_reflexive_false(make_snapshot: Any) -> None:
    summary = summarize(make_snapshot())
    assert differs(summary, summary) is False


def test_differs_without_previous_is_true(make_snapshot: Any) -> None:
    assert differs(None, summarize(make_snapshot())) is True


def test_differs_on_power_state(make_snapshot: Any) -> None:
    assert differs(summarize(make_snapshot(power="ready")), summarize(make_snapshot(power="sleep")))


def test_summary_is_ordered_tuple() -> None:
    summary = PollSummary("ready", "everyday", "park", 1.0, 2.0, 3.0, 0.0)
    assert tuple(summary)[:7] == ("ready", "everyday", "park", 1.0, 2.0, 3.0, 0.0)
