"""Check recording and up/down state machine."""

import logging
import threading

from uptime_monitor.incidents import IncidentLedger
from uptime_monitor.models import (
    Incident,
    MonitorState,
    ProbeResult,
    Sample,
    SeriesSnapshot,
    TransitionKind,
    TransitionOutcome,
)
from uptime_monitor.timeseries import TimeSeriesStore

logger = logging.getLogger(__name__)


def compute_transition(
    current: Incident | None,
    result: ProbeResult,
    now: float,
) -> TransitionOutcome:
    """Decide the transition for a probe result without touching any state.

    Args:
        current: The target's open incident, or None if it is up.
        result: Probe result to classify.
        now: Check time in epoch seconds.
    """
    if result.is_up:
        if current is None:
            return TransitionOutcome(TransitionKind.UNCHANGED_UP, now, now, result.reason)
        return TransitionOutcome(TransitionKind.BECAME_UP, current.first_start, now, result.reason)

    if current is None:
        return TransitionOutcome(TransitionKind.BECAME_DOWN, now, now, result.reason)
    return TransitionOutcome(TransitionKind.UNCHANGED_DOWN, current.first_start, now, result.reason)


class StateAggregator:
    """Owns the MonitorState and applies check results to it.

    Updates for different targets may run concurrently; updates for the
    same target are serialized by a per-target lock.
    """

    def __init__(self, state: MonitorState | None = None) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._counter_lock = threading.Lock()
        self.replace_state(state or MonitorState())

    def replace_state(self, state: MonitorState) -> None:
        """Swap in a freshly loaded state."""
        self._state = state
        self.timeseries = TimeSeriesStore(state.latency)
        self.ledger = IncidentLedger(state.incidents)

    def get_state(self) -> MonitorState:
        return self._state

    def _lock_for(self, target_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(target_id)
            if lock is None:
                lock = self._locks[target_id] = threading.Lock()
            return lock

    def record_check(self, target_id: str, result: ProbeResult, now: float) -> TransitionOutcome:
        """Apply one probe result to the target's history and incidents.

        Args:
            target_id: Monitored target id.
            result: Probe result from the external prober.
            now: Check time in epoch seconds.

        Returns:
            The transition the check caused.
        """
        with self._lock_for(target_id):
            if result.ping is not None:
                self.timeseries.append(target_id, Sample(loc=result.loc, ping=result.ping, time=now))

            outcome = compute_transition(self.ledger.current_incident(target_id), result, now)

            if outcome.kind == TransitionKind.BECAME_UP:
                self.ledger.close_incident(target_id, now)
            elif outcome.kind.is_down:
                self.ledger.open_incident(target_id, now, result.reason)

        with self._counter_lock:
            if result.is_up:
                self._state.overall_up += 1
            else:
                self._state.overall_down += 1
            self._state.last_update = now

        if outcome.kind.is_transition:
            logger.info(f"Target {target_id} {outcome.kind.value}")
        return outcome

    def current_incident(self, target_id: str) -> Incident | None:
        return self.ledger.current_incident(target_id)

    def is_up(self, target_id: str) -> bool:
        return self.ledger.current_incident(target_id) is None

    def snapshot(self, target_id: str) -> SeriesSnapshot:
        return self.timeseries.snapshot(target_id)

    def availability(self) -> float:
        """Percentage of up checks across all targets (100 before any check)."""
        total = self._state.overall_up + self._state.overall_down
        if total == 0:
            return 100.0
        return self._state.overall_up / total * 100
