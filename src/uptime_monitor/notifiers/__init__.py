"""Notification delivery transports."""

from uptime_monitor.notifiers.apprise import AppriseNotifier
from uptime_monitor.notifiers.base import BaseNotifier
from uptime_monitor.notifiers.delivery import deliver, notifier_for
from uptime_monitor.notifiers.webhook import WebhookNotifier

__all__ = ["AppriseNotifier", "BaseNotifier", "WebhookNotifier", "deliver", "notifier_for"]
