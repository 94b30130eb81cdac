"""Configuration management for Uptime Monitor."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_TIME_ZONE = "Etc/GMT"


@dataclass(frozen=True)
class AppriseNotification:
    """Notification channel delivered through an Apprise API server."""

    id: str
    apprise_api_server: str
    recipient_url: str
    time_zone: str | None = None
    grace_period: int | None = None  # minutes
    type: str = field(default="apprise", init=False)

    @classmethod
    def from_dict(cls, channel_id: str, data: dict[str, Any]) -> "AppriseNotification":
        return cls(
            id=channel_id,
            apprise_api_server=data["apprise_api_server"],
            recipient_url=data["recipient_url"],
            time_zone=data.get("time_zone"),
            grace_period=data.get("grace_period"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "apprise_api_server": self.apprise_api_server,
            "recipient_url": self.recipient_url,
        }
        return _with_common(data, self.time_zone, self.grace_period)


@dataclass(frozen=True)
class WebhookNotification:
    """Notification channel delivered as a JSON HTTP request."""

    id: str
    url: str
    method: str = "POST"
    headers: dict[str, str] = field(default_factory=dict)
    time_zone: str | None = None
    grace_period: int | None = None  # minutes
    type: str = field(default="webhook", init=False)

    @classmethod
    def from_dict(cls, channel_id: str, data: dict[str, Any]) -> "WebhookNotification":
        return cls(
            id=channel_id,
            url=data["url"],
            method=data.get("method", "POST"),
            headers=data.get("headers", {}),
            time_zone=data.get("time_zone"),
            grace_period=data.get("grace_period"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "url": self.url, "method": self.method}
        if self.headers:
            data["headers"] = dict(self.headers)
        return _with_common(data, self.time_zone, self.grace_period)


NotificationConfig = AppriseNotification | WebhookNotification


def _with_common(data: dict[str, Any], time_zone: str | None, grace_period: int | None) -> dict[str, Any]:
    if time_zone:
        data["time_zone"] = time_zone
    if grace_period is not None:
        data["grace_period"] = grace_period
    return data


def notification_from_dict(channel_id: str, data: dict[str, Any]) -> NotificationConfig:
    """Build a notification channel from its tagged dictionary form."""
    kind = data.get("type")
    if kind == "apprise":
        return AppriseNotification.from_dict(channel_id, data)
    if kind == "webhook":
        return WebhookNotification.from_dict(channel_id, data)
    raise ValueError(f"Unknown notification type for {channel_id}: {kind!r}")


@dataclass
class MonitorTarget:
    """Configuration for a single monitored endpoint."""

    id: str
    name: str
    method: str = "GET"  # "TCP_PING" or an HTTP method
    target: str = ""  # URL for HTTP, host:port for TCP
    timeout: int = 10000  # milliseconds
    expected_codes: list[int] = field(default_factory=list)
    tooltip: str | None = None
    notifications: list[str] | None = None  # None means every channel

    @classmethod
    def from_dict(cls, target_id: str, data: dict[str, Any]) -> "MonitorTarget":
        return cls(
            id=target_id,
            name=data.get("name", target_id),
            method=data.get("method", "GET"),
            target=data.get("target", ""),
            timeout=data.get("timeout", 10000),
            expected_codes=data.get("expected_codes", []),
            tooltip=data.get("tooltip"),
            notifications=data.get("notifications"),
        )


@dataclass
class Config:
    """Main configuration for Uptime Monitor."""

    monitors: list[MonitorTarget] = field(default_factory=list)
    notifications: list[NotificationConfig] = field(default_factory=list)
    state_file: str = "uptime-state.json"
    write_cooldown_minutes: int = 3
    parallel_checks: bool = True
    max_workers: int = 10
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        monitors = [
            MonitorTarget.from_dict(target_id, target_data or {})
            for target_id, target_data in (data.get("monitors") or {}).items()
        ]
        notifications = [
            notification_from_dict(channel_id, channel_data or {})
            for channel_id, channel_data in (data.get("notifications") or {}).items()
        ]

        return cls(
            monitors=monitors,
            notifications=notifications,
            state_file=data.get("state_file", "uptime-state.json"),
            write_cooldown_minutes=data.get("write_cooldown_minutes", 3),
            parallel_checks=data.get("parallel_checks", True),
            max_workers=data.get("max_workers", 10),
            log_level=data.get("log_level", "INFO"),
        )

    def get_monitor(self, target_id: str) -> MonitorTarget | None:
        """Get monitor by id."""
        for monitor in self.monitors:
            if monitor.id == target_id:
                return monitor
        return None

    def get_notification(self, channel_id: str) -> NotificationConfig | None:
        """Get notification channel by id."""
        for channel in self.notifications:
            if channel.id == channel_id:
                return channel
        return None

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._to_dict()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        monitors_dict = {}
        for monitor in self.monitors:
            monitor_data: dict[str, Any] = {
                "name": monitor.name,
                "method": monitor.method,
                "target": monitor.target,
            }
            if monitor.timeout != 10000:
                monitor_data["timeout"] = monitor.timeout
            if monitor.expected_codes:
                monitor_data["expected_codes"] = monitor.expected_codes
            if monitor.tooltip:
                monitor_data["tooltip"] = monitor.tooltip
            if monitor.notifications is not None:
                monitor_data["notifications"] = monitor.notifications
            monitors_dict[monitor.id] = monitor_data

        return {
            "monitors": monitors_dict,
            "notifications": {n.id: n.to_dict() for n in self.notifications},
            "state_file": self.state_file,
            "write_cooldown_minutes": self.write_cooldown_minutes,
            "parallel_checks": self.parallel_checks,
            "log_level": self.log_level,
        }


def create_example_config() -> Config:
    """Create an example configuration for documentation."""
    return Config(
        monitors=[
            MonitorTarget(
                id="api",
                name="Public API",
                method="GET",
                target="https://api.example.com/health",
                expected_codes=[200],
                notifications=["ops-webhook"],
            ),
            MonitorTarget(
                id="website",
                name="Website",
                method="HEAD",
                target="https://www.example.com",
            ),
            MonitorTarget(
                id="database",
                name="Database",
                method="TCP_PING",
                target="db.example.com:5432",
                tooltip="Primary PostgreSQL",
            ),
        ],
        notifications=[
            WebhookNotification(
                id="ops-webhook",
                url="https://hooks.example.com/uptime",
                headers={"Authorization": "Bearer change-me"},
                grace_period=5,
            ),
            AppriseNotification(
                id="apprise",
                apprise_api_server="https://apprise.example.com/notify",
                recipient_url="tgram://bottoken/ChatID",
                time_zone="Europe/Amsterdam",
            ),
        ],
    )
