"""Check cycle orchestration."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable

from uptime_monitor.aggregator import StateAggregator
from uptime_monitor.config import Config, MonitorTarget
from uptime_monitor.decider import NotificationDecider
from uptime_monitor.models import (
    DispatchRequest,
    ProbeResult,
    TransitionKind,
    TransitionOutcome,
)
from uptime_monitor.notifiers import deliver as default_deliver

logger = logging.getLogger(__name__)

StatusChangeCallback = Callable[[MonitorTarget, bool, float, float, str], None]
IncidentCallback = Callable[[MonitorTarget, float, float, str], None]


@dataclass
class TargetReport:
    """What happened to one target during a cycle."""

    target_id: str
    outcome: TransitionOutcome | None = None
    dispatched: list[DispatchRequest] = field(default_factory=list)
    failed: list[DispatchRequest] = field(default_factory=list)
    error: str | None = None


@dataclass
class CycleReport:
    """Reports for every target processed in a cycle."""

    now: float
    targets: list[TargetReport] = field(default_factory=list)

    @property
    def state_changed(self) -> bool:
        """True if any target went up or down."""
        return any(t.outcome is not None and t.outcome.kind.is_transition for t in self.targets)

    @property
    def errors(self) -> list[TargetReport]:
        return [t for t in self.targets if t.error is not None]


class UptimeMonitor:
    """Applies probe results to state and sends the resulting notifications."""

    def __init__(
        self,
        config: Config,
        aggregator: StateAggregator | None = None,
        deliver: Callable[[DispatchRequest], bool] = default_deliver,
        on_status_change: StatusChangeCallback | None = None,
        on_incident: IncidentCallback | None = None,
    ) -> None:
        """Initialize uptime monitor.

        Args:
            config: Configuration object.
            aggregator: State aggregator holding the loaded state.
            deliver: Sends a dispatch request, returning success.
            on_status_change: Optional callback (target, is_up, incident_start, now, reason)
                for up/down transitions.
            on_incident: Optional callback (target, incident_start, now, reason)
                for every down check.
        """
        self.config = config
        self.aggregator = aggregator or StateAggregator()
        self.decider = NotificationDecider()
        self.deliver = deliver
        self.on_status_change = on_status_change
        self.on_incident = on_incident

    def process_result(self, result: ProbeResult, now: float) -> TargetReport:
        """Record a probe result and send any notifications it triggers.

        Args:
            result: Probe result for one target.
            now: Check time in epoch seconds.

        Returns:
            TargetReport describing the outcome and deliveries.
        """
        report = TargetReport(target_id=result.target_id)

        target = self.config.get_monitor(result.target_id)
        if target is None:
            logger.warning(f"Ignoring result for unknown target: {result.target_id}")
            report.error = "unknown target"
            return report

        outcome = self.aggregator.record_check(target.id, result, now)
        report.outcome = outcome
        self._run_callbacks(target, outcome)

        for request in self.decider.decide(target, outcome, self.config.notifications):
            if self.deliver(request):
                report.dispatched.append(request)
            else:
                report.failed.append(request)

        return report

    def run_cycle(self, results: list[ProbeResult], now: float) -> CycleReport:
        """Process the probe results of one check cycle.

        Returns:
            CycleReport for all results.
        """
        cycle = CycleReport(now=now)

        if not results:
            logger.warning("No probe results in this cycle")
            return cycle

        if self.config.parallel_checks and len(results) > 1:
            # Parallel execution
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {
                    executor.submit(self.process_result, result, now): result.target_id
                    for result in results
                }

                for future in as_completed(futures):
                    target_id = futures[future]
                    try:
                        cycle.targets.append(future.result(timeout=60))
                    except Exception as e:
                        logger.error(f"Failed to process target {target_id}: {e}")
                        cycle.targets.append(TargetReport(target_id=target_id, error=str(e)))
        else:
            # Sequential execution
            for result in results:
                try:
                    cycle.targets.append(self.process_result(result, now))
                except Exception as e:
                    logger.error(f"Failed to process target {result.target_id}: {e}")
                    cycle.targets.append(TargetReport(target_id=result.target_id, error=str(e)))

        return cycle

    def _run_callbacks(self, target: MonitorTarget, outcome: TransitionOutcome) -> None:
        """Invoke user callbacks; their failures never affect the cycle."""
        try:
            if self.on_status_change is not None and outcome.kind.is_transition:
                self.on_status_change(
                    target,
                    outcome.kind == TransitionKind.BECAME_UP,
                    outcome.incident_start_time,
                    outcome.now,
                    outcome.reason,
                )
            if self.on_incident is not None and outcome.kind.is_down:
                self.on_incident(target, outcome.incident_start_time, outcome.now, outcome.reason)
        except Exception as e:
            logger.error(f"Callback failed for {target.name}: {e}")

    def get_summary(self) -> dict:
        """Get a summary of the current state of every configured target."""
        state = self.aggregator.get_state()
        targets = {}
        for target in self.config.monitors:
            incident = self.aggregator.current_incident(target.id)
            latest = self.aggregator.snapshot(target.id).latest
            targets[target.id] = {
                "name": target.name,
                "up": incident is None,
                "down_since": incident.first_start if incident else None,
                "latest_ping": latest.ping if latest else None,
                "incidents": len(self.aggregator.ledger.history(target.id)),
            }
        return {
            "last_update": state.last_update,
            "availability": round(self.aggregator.availability(), 3),
            "checks": {"up": state.overall_up, "down": state.overall_down},
            "targets": targets,
        }
