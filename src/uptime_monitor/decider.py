"""Grace-period debounce and dispatch request construction."""

import logging
from collections.abc import Sequence

from uptime_monitor.config import DEFAULT_TIME_ZONE, MonitorTarget, NotificationConfig
from uptime_monitor.errors import UnknownNotificationChannel
from uptime_monitor.formatter import format_message
from uptime_monitor.models import DispatchRequest, TransitionKind, TransitionOutcome

logger = logging.getLogger(__name__)

# Tolerance for scheduler jitter, in seconds
GRACE_SLACK = 30


def resolve_channels(
    target: MonitorTarget,
    channels: Sequence[NotificationConfig],
) -> list[NotificationConfig]:
    """Channels configured for a target.

    Uses the target's explicit channel ids, or every channel when it has
    none. Unknown ids are logged and skipped.
    """
    if target.notifications is None:
        return list(channels)

    by_id = {channel.id: channel for channel in channels}
    resolved = []
    for channel_id in target.notifications:
        try:
            resolved.append(lookup_channel(by_id, channel_id))
        except UnknownNotificationChannel as e:
            logger.warning(f"{e} (monitor {target.name})")
    return resolved


def lookup_channel(by_id: dict[str, NotificationConfig], channel_id: str) -> NotificationConfig:
    channel = by_id.get(channel_id)
    if channel is None:
        raise UnknownNotificationChannel(channel_id)
    return channel


def is_suppressed(outcome: TransitionOutcome, grace_period: int | None) -> bool:
    """Whether the grace period holds back a notification for this outcome."""
    if grace_period is None:
        return False

    downtime = outcome.downtime
    if outcome.kind.is_down:
        return downtime < grace_period * 60 - GRACE_SLACK
    if outcome.kind == TransitionKind.BECAME_UP:
        # Only announce recovery if a down notice would have gone out
        return downtime < (grace_period + 1) * 60 - GRACE_SLACK
    return False


class NotificationDecider:
    """Turns transition outcomes into dispatch requests."""

    def decide(
        self,
        target: MonitorTarget,
        outcome: TransitionOutcome,
        channels: Sequence[NotificationConfig],
    ) -> list[DispatchRequest]:
        """Build the notifications to send for one checked target.

        Args:
            target: Monitor that was checked.
            outcome: Transition returned by the state aggregator.
            channels: All configured notification channels.

        Returns:
            One DispatchRequest per channel that should be notified.
        """
        if outcome.kind == TransitionKind.UNCHANGED_UP:
            return []

        selected = resolve_channels(target, channels)
        if not selected:
            logger.info(f"No notifications configured for monitor {target.name}")
            return []

        requests = []
        for channel in selected:
            try:
                request = self._decide_channel(target, outcome, channel)
            except Exception as e:
                logger.error(f"Failed to prepare notification {channel.id} for {target.name}: {e}")
                continue
            if request is not None:
                requests.append(request)
        return requests

    def _decide_channel(
        self,
        target: MonitorTarget,
        outcome: TransitionOutcome,
        channel: NotificationConfig,
    ) -> DispatchRequest | None:
        if is_suppressed(outcome, channel.grace_period):
            logger.info(
                f"Grace period ({channel.grace_period}m) not met for {target.name} "
                f"with notification {channel.id}, skipping"
            )
            return None

        message = format_message(
            target.name,
            outcome.kind,
            outcome.incident_start_time,
            outcome.now,
            outcome.reason,
            channel.time_zone or DEFAULT_TIME_ZONE,
        )
        return DispatchRequest(
            channel_id=channel.id,
            title=message.title,
            body=message.body,
            channel=channel,
        )
