# path: src/monitoring/integration.py
"""
Helpers for emitting search lifecycle events.

Thin wrappers around monitoring.logger.log_event that keep payload shapes
consistent. Every helper takes a bus that may be None, in which case it is
a no-op; Path instances are usually built without a bus.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .bus import EventBus
from .events import EventType
from .logger import log_event

JsonDict = Dict[str, Any]

MODULE = "pathing.path"


def _coord(c: Sequence[int]) -> list[int]:
    return [int(v) for v in c]


def emit_search_started(
    bus: Optional[EventBus],
    search_id: str,
    source: Sequence[int],
    destination: Sequence[int],
    max_steps: int,
) -> None:
    if bus is None:
        return
    log_event(
        bus=bus,
        module=MODULE,
        event_type=EventType.SEARCH_STARTED,
        message="Path search started",
        payload={
            "source": _coord(source),
            "destination": _coord(destination),
            "max_steps": max_steps,
        },
        correlation_id=search_id,
    )


def emit_search_rejected(
    bus: Optional[EventBus],
    search_id: str,
    source: Sequence[int],
    destination: Sequence[int],
    source_solid: bool,
    destination_solid: bool,
) -> None:
    if bus is None:
        return
    log_event(
        bus=bus,
        module=MODULE,
        event_type=EventType.SEARCH_REJECTED,
        message="Source or destination is solid",
        payload={
            "source": _coord(source),
            "destination": _coord(destination),
            "source_solid": source_solid,
            "destination_solid": destination_solid,
        },
        correlation_id=search_id,
    )


def emit_budget_exhausted(
    bus: Optional[EventBus],
    search_id: str,
    max_calculations: int,
    expansions: int,
) -> None:
    if bus is None:
        return
    log_event(
        bus=bus,
        module=MODULE,
        event_type=EventType.BUDGET_EXHAUSTED,
        message="Calculation budget exhausted",
        payload={"max_calculations": max_calculations, "expansions": expansions},
        correlation_id=search_id,
    )


def emit_search_finished(
    bus: Optional[EventBus],
    search_id: str,
    status: str,
    expansions: int,
    path_length: int,
    path_cost: Optional[int],
) -> None:
    if bus is None:
        return
    log_event(
        bus=bus,
        module=MODULE,
        event_type=EventType.SEARCH_FINISHED,
        message=f"Path search finished: {status}",
        payload={
            "status": status,
            "expansions": expansions,
            "path_length": path_length,
            "path_cost": path_cost,
        },
        correlation_id=search_id,
    )


def emit_async_launch_failed(
    bus: Optional[EventBus],
    search_id: str,
    error: BaseException,
) -> None:
    if bus is None:
        return
    log_event(
        bus=bus,
        module=MODULE,
        event_type=EventType.ASYNC_LAUNCH_FAILED,
        message="Background search could not be scheduled",
        payload={"exception_repr": repr(error)},
        correlation_id=search_id,
    )


__all__ = [
    "emit_search_started",
    "emit_search_rejected",
    "emit_budget_exhausted",
    "emit_search_finished",
    "emit_async_launch_failed",
]
