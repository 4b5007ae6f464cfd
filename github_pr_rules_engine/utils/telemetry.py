"""Run telemetry collection."""

import threading
from datetime import UTC, datetime
from typing import Any

from .logging import LoggerMixin


class EventCollector(LoggerMixin):
    """Collects named events emitted during one interpreter run."""

    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id
        self.events: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def collect(self, event: str, properties: dict[str, Any] | None = None) -> None:
        """Record an event.

        Args:
        ----
            event: Event name
            properties: Extra event properties

        """
        record = {
            "event": event,
            "properties": dict(properties or {}),
            "run_id": self.run_id,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        with self._lock:
            self.events.append(record)
        self.logger.debug("Collected event %s: %s", event, record["properties"])

    def events_named(self, event: str) -> list[dict[str, Any]]:
        """Return collected events with the given name."""
        with self._lock:
            return [record for record in self.events if record["event"] == event]
