# path: src/monitoring/events.py
"""
Event schema for navigation monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured navigation events)

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed events emitted by the navigation session and the index."""

    # A previously unvisited cell became occupied
    OCCUPANCY_CHANGED = auto()

    # All leaf flags were reset
    INDEX_CLEARED = auto()

    # Path search lifecycle
    PATH_REQUESTED = auto()
    PATH_FOUND = auto()
    PATH_FAILED = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the navigation stack.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("nav.session", ...)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (cell, path, failure kind)
    correlation_id: Optional[str] = None  # Groups events of one path request

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data
