"""Human-readable notification messages."""

import math
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from uptime_monitor.config import DEFAULT_TIME_ZONE
from uptime_monitor.models import TransitionKind


@dataclass(frozen=True)
class Message:
    title: str
    body: str


def format_timestamp(timestamp: float, time_zone: str = DEFAULT_TIME_ZONE) -> str:
    """Format epoch seconds as ``M/DD HH:MM`` (24-hour) in the given zone."""
    moment = datetime.fromtimestamp(timestamp, tz=ZoneInfo(time_zone))
    return f"{moment.month}/{moment.day:02d} {moment.hour:02d}:{moment.minute:02d}"


def elapsed_minutes(start: float, now: float) -> int:
    """Whole minutes between two timestamps, halves rounded up."""
    return math.floor((now - start) / 60 + 0.5)


def format_message(
    monitor_name: str,
    kind: TransitionKind,
    incident_start_time: float,
    now: float,
    reason: str,
    time_zone: str = DEFAULT_TIME_ZONE,
) -> Message:
    """Render the title and body for an up, newly-down or still-down event."""
    minutes = elapsed_minutes(incident_start_time, now)
    issue = reason or "unspecified"

    if kind == TransitionKind.BECAME_UP:
        return Message(
            title=f"✅ {monitor_name} is up!",
            body=f"The service is up again after being down for {minutes} minutes.",
        )

    if now == incident_start_time:
        return Message(
            title=f"🔴 {monitor_name} is currently down.",
            body=f"Service is unavailable at {format_timestamp(now, time_zone)}. Issue: {issue}",
        )

    return Message(
        title=f"🔴 {monitor_name} is still down.",
        body=(
            f"Service is unavailable since {format_timestamp(incident_start_time, time_zone)} "
            f"({minutes} minutes). Issue: {issue}"
        ),
    )
