"""Adaptive vehicle state polling."""

from pyrivian.polling.change import PollSummary, compute_speed, differs, summarize
from pyrivian.polling.policy import SleepDecision, SleepKind, next_sleep
from pyrivian.polling.scheduler import AdaptiveScheduler, PollReporter, PollState, TelemetrySource

__all__ = [
    "AdaptiveScheduler",
    "PollReporter",
    "PollState",
    "PollSummary",
    "SleepDecision",
    "SleepKind",
    "TelemetrySource",
    "compute_speed",
    "differs",
    "next_sleep",
    "summarize",
]
