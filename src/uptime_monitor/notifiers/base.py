"""Base notifier interface."""

from abc import ABC, abstractmethod

# Seconds to wait for a notification endpoint
DEFAULT_TIMEOUT = 5


class BaseNotifier(ABC):
    """Abstract base class for notification transports."""

    @abstractmethod
    def send(self, title: str, body: str) -> bool:
        """Send a rendered notification.

        Args:
            title: Message title.
            body: Message body.

        Returns:
            True if notification was sent successfully.
        """
        ...
