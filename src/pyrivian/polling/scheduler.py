"""Adaptive poll loop.

One asyncio task samples the vehicle, reports changes and chooses how
long to wait next. It suspends only while awaiting a snapshot and while
sleeping; cancelling the task stops the loop at either point.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from pyrivian.config import PollConfig
from pyrivian.exceptions import RivianTransportError
from pyrivian.models.vehicle_state import FieldSetTier, VehicleSnapshot
from pyrivian.polling.change import PollSummary, compute_speed, differs, summarize
from pyrivian.polling.policy import SleepDecision, SleepKind, next_sleep, resets_long_pause

_logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "Rivian API appears offline"


class TelemetrySource(Protocol):
    async def fetch_snapshot(self, vehicle_id: str, tier: FieldSetTier = FieldSetTier.MINIMAL) -> VehicleSnapshot:
        ...


class PollReporter(Protocol):
    def begin(self, config: PollConfig) -> None:
        ...

    def report(self, at: datetime, summary: PollSummary) -> None:
        ...

    def notice(self, at: datetime, message: str) -> None:
        ...


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class PollState:
    """Mutable loop state, owned by a single :class:`AdaptiveScheduler` run."""

    last_summary: PollSummary | None = None
    last_change_at: datetime | None = None
    last_power_state: str | None = None
    long_pause_used: bool = False
    last_mileage: float | None = None
    last_sample_at: datetime | None = None
    offline_reported: bool = False


class AdaptiveScheduler:
    """Poll a vehicle until cancelled, or once in single-shot mode.

    Parameters
    ----------
    source
        Yields snapshots; failures must surface as
        :class:`~pyrivian.exceptions.RivianTransportError` (which
        includes malformed responses).
    reporter
        Renders poll lines and notices.
    vehicle_id
        Vehicle to sample.
    config
        Cadence and reporting settings.
    sleep, clock
        Injection points for tests; default to :func:`asyncio.sleep` and
        the local wall clock.
    """

    def __init__(
        self,
        source: TelemetrySource,
        reporter: PollReporter,
        vehicle_id: str,
        config: PollConfig,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._source = source
        self._reporter = reporter
        self._vehicle_id = vehicle_id
        self._config = config
        self._sleep = sleep
        self._clock = clock

    async def run(self) -> None:
        """Run the loop.

        Returns only in single-shot mode, after the first successful
        sample; failed samples are retried at ``poll_frequency``.
        """
        config = self._config
        self._reporter.begin(config)
        state = PollState()

        while True:
            decision = await self.poll_once(state)
            if decision is None:
                return

            if decision.kind is SleepKind.LONG_PAUSE:
                self._reporter.notice(self._clock(), f"Sleeping for {decision.seconds / 60:g} minutes")
                await self._sleep(decision.seconds)
                self._reporter.notice(
                    self._clock(),
                    f"Back to polling every {config.poll_frequency:g} seconds, showing changes only",
                )
            else:
                await self._sleep(decision.seconds)

    async def poll_once(self, state: PollState) -> SleepDecision | None:
        """Take one sample and update *state*.

        Returns the wait before the next sample, or ``None`` once a
        single-shot sample has been reported.
        """
        config = self._config
        try:
            snapshot = await self._source.fetch_snapshot(self._vehicle_id, FieldSetTier.MINIMAL)
        except RivianTransportError as exc:
            _logger.debug("Vehicle state unavailable: %s", exc)
            if not state.offline_reported:
                self._reporter.notice(self._clock(), OFFLINE_NOTICE)
            state.offline_reported = True
            state.last_summary = None
            return SleepDecision(SleepKind.INTERVAL, config.poll_frequency)

        state.offline_reported = False
        power_state = snapshot.power
        if resets_long_pause(state.last_power_state, power_state):
            state.long_pause_used = False
        state.last_power_state = power_state

        now = self._clock()
        elapsed = (now - state.last_sample_at).total_seconds() if state.last_sample_at is not None else None
        mileage = snapshot.mileage_meters or 0.0
        speed = compute_speed(mileage, state.last_mileage, elapsed, metric=config.metric)
        state.last_mileage = mileage
        state.last_sample_at = now

        summary = summarize(snapshot, speed, metric=config.metric, privacy=config.privacy)
        if config.show_all or config.single_shot or differs(state.last_summary, summary):
            self._reporter.report(now, summary)
            state.last_change_at = now
        state.last_summary = summary

        if config.single_shot:
            return None

        last_change_at = state.last_change_at or now
        decision = next_sleep(
            config,
            power_state=power_state,
            idle_seconds=(self._clock() - last_change_at).total_seconds(),
            long_pause_used=state.long_pause_used,
        )
        if decision.kind is SleepKind.LONG_PAUSE:
            state.long_pause_used = True
        return decision
