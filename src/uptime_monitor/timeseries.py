"""Bounded latency history per target."""

import logging

from uptime_monitor.errors import MalformedSampleError
from uptime_monitor.models import LatencySeries, Sample, SeriesSnapshot

logger = logging.getLogger(__name__)

RECENT_GRANULARITY = 2 * 60
RECENT_WINDOW = 12 * 60 * 60
RECENT_CAPACITY = RECENT_WINDOW // RECENT_GRANULARITY  # 360

ALL_GRANULARITY = 60 * 60
ALL_WINDOW = 90 * 24 * 60 * 60
ALL_CAPACITY = ALL_WINDOW // ALL_GRANULARITY  # 2160


def bucket_of(time: float, granularity: int) -> int:
    """Bucket index for a timestamp. Boundaries belong to the newer bucket."""
    return int(time // granularity)


def _evict(samples: list[Sample], capacity: int, window: int) -> None:
    """Drop the oldest samples beyond capacity, then those outside the window."""
    overflow = len(samples) - capacity
    if overflow > 0:
        del samples[:overflow]

    cutoff = samples[-1].time - window
    expired = 0
    while expired < len(samples) and samples[expired].time < cutoff:
        expired += 1
    if expired:
        del samples[:expired]


class TimeSeriesStore:
    """Dual-resolution ring buffers of latency samples.

    Operates on the ``latency`` mapping of a MonitorState, so updates are
    visible in the state that gets persisted.
    """

    def __init__(
        self,
        latency: dict[str, LatencySeries] | None = None,
        recent_capacity: int = RECENT_CAPACITY,
        all_capacity: int = ALL_CAPACITY,
    ) -> None:
        self._latency = latency if latency is not None else {}
        self.recent_capacity = recent_capacity
        self.all_capacity = all_capacity

    def append(self, target_id: str, sample: Sample) -> bool:
        """Add a sample to the target's history.

        Returns:
            True if the sample was stored in at least one resolution.
            Malformed samples are dropped and return False.
        """
        try:
            sample.validate()
        except MalformedSampleError as e:
            logger.debug(f"Dropping sample for {target_id}: {e}")
            return False

        series = self._latency.setdefault(target_id, LatencySeries())
        stored_recent = self._append_recent(series, sample)
        stored_all = self._append_all(series, sample)
        return stored_recent or stored_all

    def _append_recent(self, series: LatencySeries, sample: Sample) -> bool:
        recent = series.recent
        bucket = bucket_of(sample.time, RECENT_GRANULARITY)

        if recent:
            last_bucket = bucket_of(recent[-1].time, RECENT_GRANULARITY)
            if bucket < last_bucket:
                return False
            if bucket == last_bucket:
                # Latest probe in a bucket wins
                recent[-1] = sample
                return True

        recent.append(sample)
        _evict(recent, self.recent_capacity, RECENT_WINDOW)
        return True

    def _append_all(self, series: LatencySeries, sample: Sample) -> bool:
        history = series.all
        bucket = bucket_of(sample.time, ALL_GRANULARITY)

        if history and bucket <= bucket_of(history[-1].time, ALL_GRANULARITY):
            return False

        history.append(sample)
        _evict(history, self.all_capacity, ALL_WINDOW)
        return True

    def snapshot(self, target_id: str) -> SeriesSnapshot:
        """Immutable copy of the target's history (empty if unknown)."""
        series = self._latency.get(target_id)
        if series is None:
            return SeriesSnapshot()
        return series.snapshot()

    def targets(self) -> list[str]:
        return list(self._latency)
