"""Tests for data models."""

import pytest

from uptime_monitor.errors import MalformedSampleError
from uptime_monitor.models import (
    Incident,
    LatencySeries,
    MonitorState,
    Sample,
    TransitionKind,
    TransitionOutcome,
)


class TestSample:
    """Tests for Sample validation."""

    def test_valid(self):
        Sample(loc="AMS", ping=12.3, time=0).validate()

    @pytest.mark.parametrize("ping", [float("nan"), float("inf"), -0.5, "12", True])
    def test_malformed(self, ping):
        with pytest.raises(MalformedSampleError):
            Sample(loc="AMS", ping=ping, time=0).validate()


class TestIncident:
    """Tests for Incident model."""

    def test_open_incident(self):
        incident = Incident(start=[100, 220], error=["a", "b"])
        assert incident.is_open
        assert incident.first_start == 100
        assert incident.duration is None

    def test_closed_incident(self):
        incident = Incident(start=[100], end=400, error=["a"])
        assert not incident.is_open
        assert incident.duration == 300


class TestTransitionKind:
    """Tests for TransitionKind helpers."""

    def test_down_kinds(self):
        assert TransitionKind.BECAME_DOWN.is_down
        assert TransitionKind.UNCHANGED_DOWN.is_down
        assert not TransitionKind.BECAME_UP.is_down
        assert not TransitionKind.UNCHANGED_UP.is_down

    def test_transitions(self):
        assert TransitionKind.BECAME_DOWN.is_transition
        assert TransitionKind.BECAME_UP.is_transition
        assert not TransitionKind.UNCHANGED_DOWN.is_transition

    def test_outcome_downtime(self):
        outcome = TransitionOutcome(TransitionKind.BECAME_UP, 100, 400)
        assert outcome.downtime == 300


class TestMonitorState:
    """Tests for state serialization."""

    @pytest.fixture
    def state(self):
        return MonitorState(
            last_update=500,
            overall_up=10,
            overall_down=2,
            incidents={"api": [Incident(start=[100, 220], end=400, error=["timeout", ""])]},
            latency={
                "api": LatencySeries(
                    recent=[Sample(loc="AMS", ping=30, time=400)],
                    all=[Sample(loc="AMS", ping=30, time=400)],
                )
            },
        )

    def test_to_dict_uses_wire_keys(self, state):
        data = state.to_dict()
        assert data["lastUpdate"] == 500
        assert data["overallUp"] == 10
        assert data["overallDown"] == 2
        assert data["incident"]["api"][0] == {"start": [100, 220], "end": 400, "error": ["timeout", ""]}
        assert data["latency"]["api"]["recent"][0] == {"loc": "AMS", "ping": 30, "time": 400}

    def test_from_dict(self, state):
        assert MonitorState.from_dict(state.to_dict()) == state

    def test_from_empty_dict(self):
        state = MonitorState.from_dict({})
        assert state.overall_up == 0
        assert state.incidents == {}

    def test_open_incident_end_missing(self):
        state = MonitorState.from_dict({"incident": {"api": [{"start": [1], "error": ["x"]}]}})
        assert state.incidents["api"][0].is_open
