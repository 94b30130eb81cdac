"""Tests for the incident ledger."""

import pytest

from uptime_monitor.errors import NoOpenIncidentError
from uptime_monitor.incidents import IncidentLedger
from uptime_monitor.models import Incident


class TestIncidentLedger:
    """Tests for opening and closing incidents."""

    def test_open_creates_incident(self):
        ledger = IncidentLedger()
        incident, created = ledger.open_incident("api", 100, "timeout")
        assert created is True
        assert incident.start == [100]
        assert incident.error == ["timeout"]
        assert incident.end is None
        assert ledger.current_incident("api") is incident

    def test_repeated_down_extends_open_incident(self):
        ledger = IncidentLedger()
        ledger.open_incident("api", 100, "timeout")
        incident, created = ledger.open_incident("api", 220, "HTTP 502")
        assert created is False
        assert incident.start == [100, 220]
        assert incident.error == ["timeout", "HTTP 502"]
        assert len(ledger.history("api")) == 1

    def test_close_sets_end(self):
        ledger = IncidentLedger()
        ledger.open_incident("api", 100, "timeout")
        incident = ledger.close_incident("api", 400)
        assert incident.end == 400
        assert incident.duration == 300
        assert ledger.current_incident("api") is None

    def test_close_without_open_incident_fails(self):
        ledger = IncidentLedger()
        with pytest.raises(NoOpenIncidentError):
            ledger.close_incident("api", 100)

    def test_close_twice_fails(self):
        ledger = IncidentLedger()
        ledger.open_incident("api", 100, "")
        ledger.close_incident("api", 200)
        with pytest.raises(NoOpenIncidentError):
            ledger.close_incident("api", 300)

    def test_new_incident_after_recovery(self):
        ledger = IncidentLedger()
        ledger.open_incident("api", 100, "a")
        ledger.close_incident("api", 200)
        ledger.open_incident("api", 300, "b")
        history = ledger.history("api")
        assert len(history) == 2
        assert history[0].end == 200
        assert history[1].is_open

    def test_targets_are_independent(self):
        ledger = IncidentLedger()
        ledger.open_incident("api", 100, "a")
        assert ledger.current_incident("web") is None
        assert ledger.history("web") == []

    def test_rebuilds_open_index_from_state(self):
        incidents = {
            "api": [
                Incident(start=[0], end=60, error=["a"]),
                Incident(start=[120], end=None, error=["b"]),
            ],
            "web": [Incident(start=[0], end=60, error=["c"])],
        }
        ledger = IncidentLedger(incidents)
        assert ledger.current_incident("api") is incidents["api"][1]
        assert ledger.current_incident("web") is None

        ledger.close_incident("api", 300)
        assert incidents["api"][1].end == 300
