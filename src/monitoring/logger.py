# JSON logger subscribing to EventBus
"""
Structured event logging for the navigation stack.

Provides:
- JsonFileLogger: subscribes to an EventBus and writes MonitoringEvents as JSONL.
- log_event: convenience helper for publishing MonitoringEvents via the EventBus.

Usage:

    bus = EventBus()
    events = JsonFileLogger(Path("logs/monitoring/events.log"), bus)

    log_event(
        bus=bus,
        module="nav.session",
        event_type=EventType.PATH_FOUND,
        message="Path found",
        payload={"waypoints": 12},
    )
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent

log = logging.getLogger(__name__)


# ============================================================
# JSONL File Logger
# ============================================================

class JsonFileLogger:
    """
    JSON-lines sink for MonitoringEvent instances.

    Creates the parent directory, appends one UTF-8 JSON object per event
    and flushes after every line so a crash loses at most one event.
    """

    def __init__(self, path: Path, bus: EventBus) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")
        self._bus = bus
        bus.subscribe(self._on_event)

    @property
    def path(self) -> Path:
        return self._path

    def _on_event(self, event: MonitoringEvent) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        try:
            self._file.write(line + "\n")
            self._file.flush()
        except (OSError, ValueError) as exc:
            # Closed handle or full disk: report once per event, keep running.
            log.warning("Dropping monitoring event %s: %s", event.event_type.name, exc)

    def close(self) -> None:
        """Unsubscribe and close the file. Safe to call twice."""
        self._bus.unsubscribe(self._on_event)
        if not self._file.closed:
            self._file.close()


# ============================================================
# Convenience helper for emitting events
# ============================================================

def log_event(
    bus: EventBus,
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> None:
    """
    Create and publish a MonitoringEvent stamped with the current time.

    Parameters
    ----------
    bus:
        EventBus instance to publish the event to.
    module:
        Source module ("nav.session", "mapping.quadtree").
    event_type:
        EventType member describing the event.
    message:
        Short human-readable description.
    payload:
        JSON-safe data attached to this event.
    correlation_id:
        Optional ID linking the events of one path request.
    """
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=payload or {},
        correlation_id=correlation_id,
    )
    bus.publish(event)
