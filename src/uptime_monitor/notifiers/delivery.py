"""Delivery of dispatch requests to their channel transport."""

import logging

from uptime_monitor.config import AppriseNotification, NotificationConfig, WebhookNotification
from uptime_monitor.models import DispatchRequest
from uptime_monitor.notifiers.apprise import AppriseNotifier
from uptime_monitor.notifiers.base import BaseNotifier
from uptime_monitor.notifiers.webhook import WebhookNotifier

logger = logging.getLogger(__name__)


def notifier_for(channel: NotificationConfig) -> BaseNotifier:
    """Create the transport for a notification channel."""
    match channel:
        case AppriseNotification(apprise_api_server=server, recipient_url=recipient):
            return AppriseNotifier(server, recipient)
        case WebhookNotification(url=url, method=method, headers=headers):
            return WebhookNotifier(url, method=method, headers=headers)
        case _:
            raise ValueError(f"Unsupported notification channel: {channel!r}")


def deliver(request: DispatchRequest) -> bool:
    """Send a dispatch request. Failures are logged and reported, not retried."""
    try:
        notifier = notifier_for(request.channel)
        return notifier.send(request.title, request.body)
    except Exception as e:
        logger.error(f"Delivery to {request.channel_id} failed: {e}")
        return False
