"""Apprise API notification handler."""

import logging

import httpx

from uptime_monitor.notifiers.base import DEFAULT_TIMEOUT, BaseNotifier

logger = logging.getLogger(__name__)


class AppriseNotifier(BaseNotifier):
    """Send notifications through an Apprise API server."""

    def __init__(self, api_server: str, recipient_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize Apprise notifier.

        Args:
            api_server: Apprise API notify endpoint.
            recipient_url: Apprise URL of the recipient (e.g. tgram://...).
            timeout: Request timeout in seconds.
        """
        self.api_server = api_server
        self.recipient_url = recipient_url
        self.timeout = timeout

    def send(self, title: str, body: str) -> bool:
        """Send notification via Apprise."""
        logger.info(f"Sending Apprise notification: {title} - {body} via {self.api_server}")
        try:
            response = httpx.post(
                self.api_server,
                json={
                    "urls": self.recipient_url,
                    "title": title,
                    "body": body,
                    "type": "warning",
                    "format": "text",
                },
                timeout=self.timeout,
            )

            if response.is_success:
                logger.info(f"Apprise notification sent successfully, code: {response.status_code}")
                return True
            else:
                logger.error(f"Apprise server error: {response.status_code} - {response.text}")
                return False

        except httpx.HTTPError as e:
            logger.error(f"Failed to send Apprise notification: {e}")
            return False
