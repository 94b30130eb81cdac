"""Tests for state persistence."""

import json

from uptime_monitor.models import Incident, MonitorState
from uptime_monitor.storage import StateStore


class TestStateStore:
    """Tests for StateStore."""

    def test_load_missing_file(self, tmp_path):
        state = StateStore(tmp_path / "state.json").load()
        assert state == MonitorState()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        state = MonitorState(
            last_update=100,
            overall_down=1,
            incidents={"api": [Incident(start=[100], error=["timeout"])]},
        )
        StateStore(path).save(state)

        assert json.loads(path.read_text())["overallDown"] == 1
        assert StateStore(path).load() == state
        assert [p.name for p in path.parent.iterdir()] == ["state.json"]

    def test_save_if_due_on_change(self, tmp_path):
        store = StateStore(tmp_path / "state.json", write_cooldown_minutes=3)
        store.save(MonitorState(last_update=100))

        assert store.save_if_due(MonitorState(last_update=160), 160, changed=False) is False
        assert store.save_if_due(MonitorState(last_update=160), 160, changed=True) is True

    def test_save_if_due_after_cooldown(self, tmp_path):
        store = StateStore(tmp_path / "state.json", write_cooldown_minutes=3)
        store.save(MonitorState(last_update=100))

        assert store.save_if_due(MonitorState(last_update=279), 279, changed=False) is False
        assert store.save_if_due(MonitorState(last_update=280), 280, changed=False) is True

    def test_first_write_always_due(self, tmp_path):
        store = StateStore(tmp_path / "state.json", write_cooldown_minutes=60)
        assert store.save_if_due(MonitorState(last_update=5), 5, changed=False) is True
        assert (tmp_path / "state.json").exists()
