"""Events emitted while a deployment runs."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import UUID

Listener = Callable[["Event"], None]


@dataclass
class Event:
    """A deployment run event."""

    event_type: str
    run_id: UUID
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        """Serialize as one JSON line."""
        return json.dumps(
            {
                "event": self.event_type,
                "run_id": str(self.run_id),
                **self.data,
                "timestamp": self.timestamp.isoformat(),
            }
        )


class EventBus:
    """Simple synchronous event bus for run events."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` for every future event."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)

    def publish_phase_started(self, run_id: UUID, phase: str) -> None:
        """Publish a phase started event."""
        self.publish(Event("phase_started", run_id, {"phase": phase}))

    def publish_phase_completed(self, run_id: UUID, phase: str, duration_ms: int) -> None:
        """Publish a phase completed event."""
        self.publish(
            Event("phase_completed", run_id, {"phase": phase, "duration_ms": duration_ms})
        )

    def publish_phase_skipped(self, run_id: UUID, phase: str, reason: str) -> None:
        self.publish(Event("phase_skipped", run_id, {"phase": phase, "reason": reason}))

    def publish_deployment_complete(self, run_id: UUID, target: str, git_ref: str) -> None:
        self.publish(
            Event("deployment_complete", run_id, {"target": target, "git_ref": git_ref})
        )

    def publish_error(self, run_id: UUID, error: str, phase: str | None = None) -> None:
        """Publish an error event."""
        self.publish(Event("error", run_id, {"error": error, "phase": phase}))
