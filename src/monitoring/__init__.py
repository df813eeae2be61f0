"""
Structured monitoring for path searches.

Exports:
    - EventBus: thread-safe in-process pub/sub
    - EventType / MonitoringEvent: event schema
    - JsonFileLogger / log_event: JSONL sink and publish helper
"""

from __future__ import annotations

from .bus import EventBus
from .events import EventType, MonitoringEvent
from .logger import JsonFileLogger, log_event

__all__ = [
    "EventBus",
    "EventType",
    "MonitoringEvent",
    "JsonFileLogger",
    "log_event",
]
