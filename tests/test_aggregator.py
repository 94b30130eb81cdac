"""Tests for the check-recording state machine."""

import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from uptime_monitor.aggregator import StateAggregator, compute_transition
from uptime_monitor.models import Incident, MonitorState, ProbeResult, TransitionKind


def up(target_id="api", ping=50.0):
    return ProbeResult(target_id=target_id, is_up=True, ping=ping, loc="AMS")


def down(target_id="api", reason="timeout", ping=None):
    return ProbeResult(target_id=target_id, is_up=False, ping=ping, loc="AMS", reason=reason)


class TestRecordCheck:
    """Tests for StateAggregator.record_check."""

    @pytest.fixture
    def aggregator(self):
        return StateAggregator()

    def test_first_up_is_unchanged(self, aggregator):
        outcome = aggregator.record_check("api", up(), 100)
        assert outcome.kind == TransitionKind.UNCHANGED_UP
        assert aggregator.ledger.history("api") == []
        assert aggregator.is_up("api")

    def test_down_then_up(self, aggregator):
        outcome = aggregator.record_check("api", down(), 100)
        assert outcome.kind == TransitionKind.BECAME_DOWN
        assert outcome.incident_start_time == 100
        assert outcome.reason == "timeout"
        assert not aggregator.is_up("api")

        outcome = aggregator.record_check("api", up(), 400)
        assert outcome.kind == TransitionKind.BECAME_UP
        assert outcome.incident_start_time == 100
        assert outcome.downtime == 300

        incident = aggregator.ledger.history("api")[0]
        assert incident.end == 400

    def test_still_down_carries_first_start(self, aggregator):
        aggregator.record_check("api", down(reason="timeout"), 0)
        outcome = aggregator.record_check("api", down(reason="HTTP 503"), 120)
        assert outcome.kind == TransitionKind.UNCHANGED_DOWN
        assert outcome.incident_start_time == 0

        incident = aggregator.current_incident("api")
        assert incident.start == [0, 120]
        assert incident.error == ["timeout", "HTTP 503"]

    def test_counters_and_last_update(self, aggregator):
        aggregator.record_check("api", up(), 100)
        aggregator.record_check("api", down(), 220)
        aggregator.record_check("web", up(), 230)

        state = aggregator.get_state()
        assert state.overall_up == 2
        assert state.overall_down == 1
        assert state.last_update == 230
        assert aggregator.availability() == pytest.approx(200 / 3)

    def test_availability_before_any_check(self, aggregator):
        assert aggregator.availability() == 100.0

    def test_missing_ping_skips_latency(self, aggregator):
        outcome = aggregator.record_check("api", down(ping=None), 100)
        assert outcome.kind == TransitionKind.BECAME_DOWN
        assert aggregator.snapshot("api").recent == ()
        assert aggregator.get_state().overall_down == 1

    def test_down_probe_with_ping_is_recorded(self, aggregator):
        aggregator.record_check("api", down(ping=900.0), 100)
        assert aggregator.snapshot("api").latest.ping == 900.0

    def test_malformed_ping_still_counted(self, aggregator):
        outcome = aggregator.record_check("api", up(ping=float("nan")), 100)
        assert outcome.kind == TransitionKind.UNCHANGED_UP
        assert aggregator.snapshot("api").recent == ()
        assert aggregator.get_state().overall_up == 1

    def test_latency_recorded_with_check_time(self, aggregator):
        aggregator.record_check("api", up(ping=12.5), 100)
        latest = aggregator.snapshot("api").latest
        assert latest.ping == 12.5
        assert latest.time == 100
        assert latest.loc == "AMS"


class TestInvariants:
    """Property-style checks over random probe sequences."""

    @pytest.mark.parametrize("seed", range(5))
    def test_at_most_one_open_incident(self, seed):
        rng = random.Random(seed)
        aggregator = StateAggregator()

        for step in range(300):
            result = up() if rng.random() < 0.6 else down(reason=f"err-{step}")
            aggregator.record_check("api", result, step * 120)

            history = aggregator.ledger.history("api")
            open_incidents = [i for i in history if i.is_open]
            assert len(open_incidents) <= 1
            if open_incidents:
                assert history[-1] is open_incidents[0]
            for incident in history:
                assert len(incident.start) == len(incident.error)

    def test_compute_transition_is_pure(self):
        current = Incident(start=[0, 120], end=None, error=["a", "b"])
        result = down(reason="c")
        first = compute_transition(current, result, 240)
        second = compute_transition(current, result, 240)
        assert first == second
        assert current.start == [0, 120]


class TestStateReplacement:
    """Tests for full-state get/replace."""

    def test_resumes_open_incident_from_loaded_state(self):
        state = MonitorState(
            incidents={"api": [Incident(start=[100], end=None, error=["timeout"])]},
        )
        aggregator = StateAggregator(state)

        outcome = aggregator.record_check("api", up(), 700)
        assert outcome.kind == TransitionKind.BECAME_UP
        assert outcome.incident_start_time == 100
        assert state.incidents["api"][0].end == 700

    def test_replace_state(self):
        aggregator = StateAggregator()
        aggregator.record_check("api", down(), 100)

        fresh = MonitorState()
        aggregator.replace_state(fresh)
        assert aggregator.get_state() is fresh
        assert aggregator.current_incident("api") is None


class TestConcurrency:
    """Tests for concurrent use across and within targets."""

    def test_parallel_targets(self):
        aggregator = StateAggregator()
        targets = [f"t{i}" for i in range(8)]

        def run(target_id):
            for step in range(50):
                aggregator.record_check(target_id, down(target_id) if step % 10 < 3 else up(target_id), step * 120)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(run, targets))

        state = aggregator.get_state()
        assert state.overall_up + state.overall_down == 8 * 50
        assert state.overall_down == 8 * 15
        for target_id in targets:
            assert len(aggregator.ledger.history(target_id)) == 5

    def test_same_target_serialized(self):
        aggregator = StateAggregator()

        def run(offset):
            for step in range(100):
                aggregator.record_check("api", down(), offset + step)

        with ThreadPoolExecutor(max_workers=4) as executor:
            list(executor.map(run, [0, 1000, 2000, 3000]))

        history = aggregator.ledger.history("api")
        assert len(history) == 1
        assert len(history[0].start) == 400
