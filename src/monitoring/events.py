# path: src/monitoring/events.py
"""
Event schema for pathfinder monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured search lifecycle events)

All events are JSON-serializable via `.to_dict()` and are intended for use
with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional


class EventType(Enum):
    """Typed monitoring events emitted by Path instances."""

    # A search entered CALCULATING
    SEARCH_STARTED = auto()

    # Source or destination was solid; no search performed
    SEARCH_REJECTED = auto()

    # Terminal status reached (found or not found)
    SEARCH_FINISHED = auto()

    # A budgeted run ran out of calculations before terminating
    BUDGET_EXHAUSTED = auto()

    # Background computation could not be scheduled
    ASYNC_LAUNCH_FAILED = auto()

    # Generic log messages
    LOG = auto()


@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the pathfinder.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("pathing.path", ...)
    event_type: EventType
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (coords, counts, status)
    correlation_id: Optional[str] = None  # Groups events of one search

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name
        return data


__all__ = ["EventType", "MonitoringEvent"]
