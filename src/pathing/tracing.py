# src/pathing/tracing.py
"""
Tracing for finished searches.

A thin structured-logging layer: every Path that reaches a terminal status
hands its numbers to a SearchTracer, which keeps a rolling buffer and
emits one INFO line. Callers that want aggregate numbers (mean expansions,
failure rate) read get_records().
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from .types import Coord, PathStatus


@dataclass
class SearchTraceRecord:
    """Outcome of one search."""

    timestamp: float        # wall-clock time (time.time())
    duration_s: float       # construction to terminal status, in seconds

    source: Coord
    destination: Coord
    status: PathStatus

    expansions: int         # cells popped from the frontier
    cells_created: int      # cells the grid held at teardown
    path_length: int        # waypoints, 0 unless PATH_FOUND
    path_cost: Optional[int]
    background: bool


class SearchTracer:
    """
    In-memory search tracer with logging.

    Thread-safe enough for its use: deque.append is atomic, and records are
    only ever appended.
    """

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        max_records: int = 10_000,
    ) -> None:
        self._logger = logger or logging.getLogger("pathing.search")
        self._records: Deque[SearchTraceRecord] = deque(maxlen=max_records)

    def record(
        self,
        *,
        source: Coord,
        destination: Coord,
        status: PathStatus,
        expansions: int,
        cells_created: int,
        path_length: int,
        path_cost: Optional[int],
        duration_s: float,
        background: bool = False,
    ) -> SearchTraceRecord:
        record = SearchTraceRecord(
            timestamp=time.time(),
            duration_s=duration_s,
            source=source,
            destination=destination,
            status=status,
            expansions=expansions,
            cells_created=cells_created,
            path_length=path_length,
            path_cost=path_cost,
            background=background,
        )
        self._records.append(record)

        self._logger.info(
            "search_done status=%s src=%s dst=%s expansions=%d cells=%d "
            "length=%d cost=%s duration=%.4fs async=%s",
            record.status.name,
            record.source,
            record.destination,
            record.expansions,
            record.cells_created,
            record.path_length,
            record.path_cost,
            record.duration_s,
            record.background,
        )
        return record

    def get_records(self) -> List[SearchTraceRecord]:
        """Snapshot of all buffered records."""
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


_default_tracer: Optional[SearchTracer] = None


def default_tracer() -> SearchTracer:
    """Process-wide tracer used by Path when none is passed in."""
    global _default_tracer
    if _default_tracer is None:
        _default_tracer = SearchTracer()
    return _default_tracer


__all__ = ["SearchTraceRecord", "SearchTracer", "default_tracer"]
