# pathing package
# src/pathing/__init__.py
"""
Budgeted, resumable A* pathfinding over a chunked voxel world.

Provides:
- Path: one search; synchronous budgeted stepping or background mode
- PathStatus: CALCULATING / PATH_FOUND / PATH_NOT_FOUND
- WorldRegion: the read-only world interface a search consumes
- PathfinderConfig / load_config / default_config: tuning
- floor_coord / block_center: coordinate helpers
"""

from __future__ import annotations

from .config import PathfinderConfig, default_config, load_config
from .errors import PathfinderError
from .path import Path, shutdown_shared_executor
from .types import Coord, PathStatus, block_center, floor_coord
from .world_probe import WorldRegion

__all__ = [
    "Path",
    "PathStatus",
    "PathfinderError",
    "PathfinderConfig",
    "default_config",
    "load_config",
    "WorldRegion",
    "Coord",
    "floor_coord",
    "block_center",
    "shutdown_shared_executor",
]
