from __future__ import annotations

import pytest

from pyrivian.config import PollConfig
from pyrivian.exceptions import RivianConfigError
from pyrivian.polling.policy import SleepDecision, SleepKind, next_sleep, resets_long_pause


def _config(**kwargs: float) -> PollConfig:
    return PollConfig(poll_frequency=30, inactivity_wait=600, sleep_wait=2400, **kwargs)


def test_sleeping_vehicle_uses_interval_even_when_idle() -> None:
    decision = next_sleep(_config(), power_state="sleep", idle_seconds=10_000, long_pause_used=False)
    assert decision == SleepDecision(SleepKind.INTERVAL, 30)


def test_idle_awake_vehicle_gets_long_pause() -> None:
    decision = next_sleep(_config(), power_state="ready", idle_seconds=600, long_pause_used=False)
    assert decision == SleepDecision(SleepKind.LONG_PAUSE, 2400)


def test_long_pause_not_repeated_in_same_cycle() -> None:
    decision = next_sleep(_config(), power_state="ready", idle_seconds=10_000, long_pause_used=True)
    assert decision.kind is SleepKind.INTERVAL


def test_recently_changed_vehicle_uses_interval() -> None:
    decision = next_sleep(_config(), power_state="ready", idle_seconds=599, long_pause_used=False)
    assert decision.kind is SleepKind.INTERVAL


def test_zero_inactivity_wait_disables_long_pause() -> None:
    config = PollConfig(poll_frequency=5, inactivity_wait=0)
    decision = next_sleep(config, power_state="ready", idle_seconds=10_000, long_pause_used=False)
    assert decision == SleepDecision(SleepKind.INTERVAL, 5)


@pytest.mark.parametrize(
    ("previous", "current", "expected"),
    [
        ("ready", "ready", False),
        ("ready", "go", True),
        ("go", "ready", True),
        ("sleep", "ready", True),
        (None, "ready", True),
        ("standby", "standby", True),
    ],
)
def test_long_pause_reset_scope(previous: str | None, current: str, expected: bool) -> None:
    assert resets_long_pause(previous, current) is expected


@pytest.mark.parametrize(
    "kwargs",
    [{"poll_frequency": 0}, {"inactivity_wait": -1}, {"sleep_wait": -5}],
)
def test_poll_config_rejects_bad_values(kwargs: dict[str, float]) -> None:
    with pytest.raises(RivianConfigError):
        PollConfig(**kwargs)


def test_poll_config_from_env_prefers_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RIVIAN_POLL_FREQUENCY", "10")
    monkeypatch.setenv("RIVIAN_POLL_SLEEP_WAIT", "600")

    config = PollConfig.from_env(poll_frequency=20, inactivity_wait=None)

    assert config.poll_frequency == 20
    assert config.sleep_wait == 600
    assert config.inactivity_wait == 0


def test_poll_config_from_env_rejects_non_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RIVIAN_POLL_FREQUENCY", "often")
    with pytest.raises(RivianConfigError, match="RIVIAN_POLL_FREQUENCY"):
        PollConfig.from_env()
