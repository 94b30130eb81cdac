"""Generic webhook notification handler."""

import logging
import time

import httpx

from uptime_monitor.notifiers.base import DEFAULT_TIMEOUT, BaseNotifier

logger = logging.getLogger(__name__)


class WebhookNotifier(BaseNotifier):
    """Send notifications via generic HTTP webhook."""

    def __init__(
        self,
        url: str,
        method: str = "POST",
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            url: Webhook URL.
            method: HTTP method (default POST).
            headers: Optional headers, applied over the JSON content type.
            timeout: Request timeout in seconds.
        """
        self.url = url
        self.method = (method or "POST").upper()
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.timeout = timeout

    def send(self, title: str, body: str) -> bool:
        """Send notification via webhook."""
        logger.info(f"Sending webhook notification: {title} - {body} to {self.url}")
        payload = {
            "title": title,
            "body": body,
            "timestamp": int(time.time() * 1000),
        }
        try:
            response = httpx.request(
                method=self.method,
                url=self.url,
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )

            if response.is_success:
                logger.info(f"Webhook notification sent successfully, code: {response.status_code}")
                return True
            else:
                logger.error(f"Webhook error: {response.status_code} - {response.text}")
                return False

        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification: {e}")
            return False
