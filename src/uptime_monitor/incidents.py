"""Per-target ledger of downtime windows."""

import logging

from uptime_monitor.errors import NoOpenIncidentError
from uptime_monitor.models import Incident

logger = logging.getLogger(__name__)


class IncidentLedger:
    """Ordered incident lists plus an index of each target's open incident.

    Incidents are never merged or deleted. Only the last incident of a
    target may be open.
    """

    def __init__(self, incidents: dict[str, list[Incident]] | None = None) -> None:
        """Initialize the ledger over an existing incident mapping.

        Args:
            incidents: Mapping of target id to incident list, usually taken
                from a loaded MonitorState. Mutated in place.
        """
        self._incidents = incidents if incidents is not None else {}
        self._open: dict[str, int] = {}

        for target_id, history in self._incidents.items():
            if history and history[-1].is_open:
                self._open[target_id] = len(history) - 1

    def open_incident(self, target_id: str, time: float, reason: str) -> tuple[Incident, bool]:
        """Record a down probe for a target.

        Returns:
            Tuple of (incident, created). A down probe while an incident is
            already open extends that incident instead of creating one.
        """
        current = self.current_incident(target_id)
        if current is not None:
            current.start.append(time)
            current.error.append(reason)
            return current, False

        history = self._incidents.setdefault(target_id, [])
        incident = Incident(start=[time], end=None, error=[reason])
        history.append(incident)
        self._open[target_id] = len(history) - 1
        logger.info(f"Opened incident for {target_id} at {time}: {reason}")
        return incident, True

    def close_incident(self, target_id: str, time: float) -> Incident:
        """Close the target's open incident at the given time."""
        index = self._open.pop(target_id, None)
        if index is None:
            raise NoOpenIncidentError(target_id)

        incident = self._incidents[target_id][index]
        incident.end = time
        logger.info(f"Closed incident for {target_id} at {time}")
        return incident

    def current_incident(self, target_id: str) -> Incident | None:
        index = self._open.get(target_id)
        if index is None:
            return None
        return self._incidents[target_id][index]

    def history(self, target_id: str) -> list[Incident]:
        """All incidents recorded for a target, oldest first."""
        return list(self._incidents.get(target_id, []))
