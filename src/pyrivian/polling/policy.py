"""Pure scheduling policy for the poll loop.

This module holds no state; :class:`pyrivian.polling.scheduler.AdaptiveScheduler`
feeds it the current power state and idle time and sleeps for whatever
it returns.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pyrivian._constants import POWER_STATE_READY, POWER_STATE_SLEEP
from pyrivian.config import PollConfig


class SleepKind(enum.StrEnum):
    INTERVAL = "interval"
    LONG_PAUSE = "long_pause"


@dataclass(frozen=True, slots=True)
class SleepDecision:
    kind: SleepKind
    seconds: float


def resets_long_pause(previous_power: str | None, current_power: str | None) -> bool:
    """The long-pause allowance belongs to one continuous ``ready`` cycle.

    It is cleared on every sample except one where the vehicle was
    ``ready`` before and is still ``ready``.
    """
    return not (previous_power == POWER_STATE_READY and current_power == POWER_STATE_READY)


def next_sleep(
    config: PollConfig,
    *,
    power_state: str | None,
    idle_seconds: float,
    long_pause_used: bool,
) -> SleepDecision:
    """Decide how long to wait before the next sample.

    A sleeping vehicle is polled at the normal interval. An awake vehicle
    that has shown no change for ``inactivity_wait`` seconds gets one
    ``sleep_wait`` pause per ready cycle so it can go dormant.
    """
    if power_state == POWER_STATE_SLEEP:
        return SleepDecision(SleepKind.INTERVAL, config.poll_frequency)
    if config.long_pause_enabled and not long_pause_used and idle_seconds >= config.inactivity_wait:
        return SleepDecision(SleepKind.LONG_PAUSE, config.sleep_wait)
    return SleepDecision(SleepKind.INTERVAL, config.poll_frequency)
