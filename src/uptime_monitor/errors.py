"""Exceptions raised by the uptime monitor core."""


class UptimeMonitorError(Exception):
    """Base class for uptime monitor errors."""


class NoOpenIncidentError(UptimeMonitorError):
    """Raised when closing an incident for a target that has none open."""

    def __init__(self, target_id: str) -> None:
        super().__init__(f"No open incident for target: {target_id}")
        self.target_id = target_id


class MalformedSampleError(UptimeMonitorError):
    """Raised when a latency sample carries a non-finite or negative ping."""


class UnknownNotificationChannel(UptimeMonitorError):
    """Raised when a monitor references a channel id missing from config."""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Unknown notification channel: {channel_id}")
        self.channel_id = channel_id
