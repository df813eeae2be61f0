# core shared types for the pathing package
# src/pathing/types.py
"""
Shared types for the voxel pathfinder.

Coordinates are plain integer 3-tuples (block positions). Continuous
positions coming from entities are floored with `floor_coord` before they
reach the search.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Sequence, Tuple

# (x, y, z) integer block coordinates
Coord = Tuple[int, int, int]

# Continuous (x, y, z) position, e.g. an entity position
Point = Tuple[float, float, float]


class PathStatus(Enum):
    """Lifecycle status of a single path search."""

    CALCULATING = "calculating"
    PATH_FOUND = "path_found"
    PATH_NOT_FOUND = "path_not_found"

    @property
    def is_terminal(self) -> bool:
        return self is not PathStatus.CALCULATING


class CellStatus(Enum):
    """Which list a cell is on. Transitions only move forward."""

    UNVISITED = 0
    OPEN = 1
    CLOSED = 2


def floor_coord(point: Sequence[float]) -> Coord:
    """
    Floor a continuous position to the block that contains it.

    Uses math.floor rather than int() so negative positions land in the
    correct block (-0.5 -> -1, not 0).
    """
    x, y, z = point
    return math.floor(x), math.floor(y), math.floor(z)


def offset(coord: Coord, dx: int, dy: int, dz: int) -> Coord:
    return coord[0] + dx, coord[1] + dy, coord[2] + dz


def block_center(coord: Coord) -> Point:
    """Horizontal center of a block at its floor height, for steering."""
    return coord[0] + 0.5, float(coord[1]), coord[2] + 0.5


__all__ = [
    "Coord",
    "Point",
    "PathStatus",
    "CellStatus",
    "floor_coord",
    "offset",
    "block_center",
]
