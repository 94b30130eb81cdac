"""JSON file persistence for MonitorState."""

import json
import logging
import os
import tempfile
from pathlib import Path

from uptime_monitor.models import MonitorState

logger = logging.getLogger(__name__)


class StateStore:
    """Loads and stores the full MonitorState as a JSON document."""

    def __init__(self, path: str | Path, write_cooldown_minutes: int = 3) -> None:
        """Initialize state store.

        Args:
            path: JSON file holding the state.
            write_cooldown_minutes: Minimum minutes between unforced writes.
        """
        self.path = Path(path)
        self.write_cooldown_minutes = write_cooldown_minutes
        self._last_write: float | None = None

    def load(self) -> MonitorState:
        """Load state, or return an empty state if none has been saved yet."""
        if not self.path.exists():
            logger.info(f"No state file at {self.path}, starting fresh")
            return MonitorState()

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)

        state = MonitorState.from_dict(data)
        self._last_write = state.last_update
        return state

    def save(self, state: MonitorState) -> None:
        """Write the state, replacing the previous file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self._last_write = state.last_update
        logger.debug(f"State written to {self.path}")

    def save_if_due(self, state: MonitorState, now: float, changed: bool) -> bool:
        """Write the state if a transition happened or the cooldown elapsed.

        Returns:
            True if the state was written.
        """
        due = (
            changed
            or self._last_write is None
            or now - self._last_write >= self.write_cooldown_minutes * 60
        )
        if not due:
            logger.debug("Skipping state write, cooldown not elapsed")
            return False

        self.save(state)
        return True
