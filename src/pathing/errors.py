# src/pathing/errors.py
"""
Domain errors for the pathing package.

Search outcomes (found / not found / budget exhausted) are reported as
PathStatus values, never as exceptions. PathfinderError is reserved for
callers using the API incorrectly, e.g. reading waypoints from a search
that did not find a path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PathfinderError(RuntimeError):
    """
    Raised on misuse of a Path instance.

    Codes in use:
        - "no_path":            waypoint access on a search without PATH_FOUND
        - "cursor_exhausted":   next_point() called past the last waypoint
        - "index_out_of_range": point(index) outside the waypoint list
        - "async_already_started": start_async() called twice
        - "async_in_flight":    synchronous stepping while a background run owns the search
    """

    code: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"PathfinderError(code={self.code!r}, details={self.details!r})"


__all__ = ["PathfinderError"]
