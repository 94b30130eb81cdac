"""
Uptime Monitor - uptime state tracking with debounced notifications.

Keeps a bounded latency history and an incident ledger per monitored
target, detects up/down transitions and decides which notification
channels to alert, honoring per-channel grace periods.
"""

__version__ = "1.0.0"

from uptime_monitor.aggregator import StateAggregator
from uptime_monitor.config import Config, MonitorTarget, NotificationConfig
from uptime_monitor.decider import NotificationDecider
from uptime_monitor.models import (
    DispatchRequest,
    Incident,
    MonitorState,
    ProbeResult,
    TransitionKind,
    TransitionOutcome,
)
from uptime_monitor.monitor import UptimeMonitor

__all__ = [
    "Config",
    "MonitorTarget",
    "NotificationConfig",
    "StateAggregator",
    "NotificationDecider",
    "UptimeMonitor",
    "DispatchRequest",
    "Incident",
    "MonitorState",
    "ProbeResult",
    "TransitionKind",
    "TransitionOutcome",
]
