"""Shared fixtures."""

import pytest

from uptime_monitor.config import Config, MonitorTarget, WebhookNotification


@pytest.fixture
def api_target():
    return MonitorTarget(id="api", name="api", target="https://api.example.com")


@pytest.fixture
def webhook_channel():
    return WebhookNotification(id="hook", url="https://hooks.example.com/uptime")


@pytest.fixture
def config(api_target, webhook_channel):
    return Config(
        monitors=[
            api_target,
            MonitorTarget(id="web", name="web", target="https://www.example.com"),
        ],
        notifications=[webhook_channel],
        parallel_checks=False,
    )
