"""Data models for uptime state and notification decisions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from uptime_monitor.errors import MalformedSampleError

if TYPE_CHECKING:
    from uptime_monitor.config import NotificationConfig


@dataclass(frozen=True)
class Sample:
    """A single latency measurement for a target."""

    loc: str
    ping: float
    time: float

    def validate(self) -> None:
        """Raise MalformedSampleError if the ping is not a usable latency."""
        if isinstance(self.ping, bool) or not isinstance(self.ping, (int, float)):
            raise MalformedSampleError(f"Ping is not a number: {self.ping!r}")
        if not math.isfinite(self.ping) or self.ping < 0:
            raise MalformedSampleError(f"Ping out of range: {self.ping!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"loc": self.loc, "ping": self.ping, "time": self.time}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Sample":
        return cls(loc=data.get("loc", ""), ping=data["ping"], time=data["time"])


@dataclass(frozen=True)
class SeriesSnapshot:
    """Immutable copy of a target's latency history."""

    recent: tuple[Sample, ...] = ()
    all: tuple[Sample, ...] = ()

    @property
    def latest(self) -> Sample | None:
        return self.recent[-1] if self.recent else None


@dataclass
class LatencySeries:
    """Dual-resolution latency history.

    ``recent`` holds the last 12 hours at 2-minute granularity, ``all``
    holds 90 days at 1-hour granularity.
    """

    recent: list[Sample] = field(default_factory=list)
    all: list[Sample] = field(default_factory=list)

    def snapshot(self) -> SeriesSnapshot:
        return SeriesSnapshot(recent=tuple(self.recent), all=tuple(self.all))

    def to_dict(self) -> dict[str, Any]:
        return {
            "recent": [s.to_dict() for s in self.recent],
            "all": [s.to_dict() for s in self.all],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LatencySeries":
        return cls(
            recent=[Sample.from_dict(s) for s in data.get("recent", [])],
            all=[Sample.from_dict(s) for s in data.get("all", [])],
        )


@dataclass
class Incident:
    """A downtime window for one target.

    ``start`` and ``error`` are parallel: one entry per down probe recorded
    while the incident was open. ``end`` is None while the incident is open.
    """

    start: list[float] = field(default_factory=list)
    end: float | None = None
    error: list[str] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.end is None

    @property
    def first_start(self) -> float:
        return self.start[0]

    @property
    def duration(self) -> float | None:
        """Seconds between the first down probe and recovery, if closed."""
        if self.end is None:
            return None
        return self.end - self.first_start

    def to_dict(self) -> dict[str, Any]:
        return {"start": list(self.start), "end": self.end, "error": list(self.error)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Incident":
        return cls(
            start=list(data.get("start", [])),
            end=data.get("end"),
            error=list(data.get("error", [])),
        )


@dataclass
class MonitorState:
    """Complete persisted state for a deployment."""

    last_update: float = 0
    overall_up: int = 0
    overall_down: int = 0
    incidents: dict[str, list[Incident]] = field(default_factory=dict)
    latency: dict[str, LatencySeries] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "lastUpdate": self.last_update,
            "overallUp": self.overall_up,
            "overallDown": self.overall_down,
            "incident": {
                target_id: [i.to_dict() for i in incidents]
                for target_id, incidents in self.incidents.items()
            },
            "latency": {
                target_id: series.to_dict()
                for target_id, series in self.latency.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonitorState":
        """Create state from a dictionary produced by to_dict()."""
        return cls(
            last_update=data.get("lastUpdate", 0),
            overall_up=data.get("overallUp", 0),
            overall_down=data.get("overallDown", 0),
            incidents={
                target_id: [Incident.from_dict(i) for i in incidents]
                for target_id, incidents in data.get("incident", {}).items()
            },
            latency={
                target_id: LatencySeries.from_dict(series)
                for target_id, series in data.get("latency", {}).items()
            },
        )


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one probe, as supplied by the external prober."""

    target_id: str
    is_up: bool
    ping: float | None = None
    loc: str = ""
    reason: str = ""


class TransitionKind(str, Enum):
    """What a check did to a target's up/down state."""

    UNCHANGED_UP = "unchanged-up"
    UNCHANGED_DOWN = "still-down"
    BECAME_DOWN = "became-down"
    BECAME_UP = "became-up"

    @property
    def is_down(self) -> bool:
        return self in (TransitionKind.BECAME_DOWN, TransitionKind.UNCHANGED_DOWN)

    @property
    def is_transition(self) -> bool:
        return self in (TransitionKind.BECAME_DOWN, TransitionKind.BECAME_UP)


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of recording a check against a target."""

    kind: TransitionKind
    incident_start_time: float
    now: float
    reason: str = ""

    @property
    def downtime(self) -> float:
        """Seconds since the incident began."""
        return self.now - self.incident_start_time


@dataclass(frozen=True)
class DispatchRequest:
    """A rendered notification ready for the delivery collaborator."""

    channel_id: str
    title: str
    body: str
    channel: NotificationConfig
