# world solidity queries with fence / liquid overlays
# src/pathing/world_probe.py
"""
WorldProbe: the only place a world query turns into a collision decision.

This module does not know how chunks are stored. It talks to a narrow
WorldRegion protocol and applies two overlay rules on top of plain
solidity:

- fence-like block at (x, y, z)  -> (x, y + 1, z) forced solid
  (mobs always treat a fence as two blocks high and won't try to stand on it)
- liquid block at (x, y, z)      -> (x, y - 1, z) forced solid
  (keeps the search on the liquid surface instead of routing underneath)

Unknown terrain is impassable: an unloaded / invalid region, or a world
query that raises, is reported as solid.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Optional, Protocol

from world.blocks import normalize_block_id

from .cell_grid import CellGrid
from .types import Coord, offset

log = logging.getLogger(__name__)


class WorldRegion(Protocol):
    """Read-only view of a voxel world, as consumed by the pathfinder."""

    def region_valid_at(self, coord: Coord) -> bool:
        """True if the chunk owning `coord` is loaded and usable."""
        ...

    def solid_at(self, coord: Coord) -> bool:
        """True if the block at `coord` blocks movement."""
        ...

    def block_at(self, coord: Coord) -> Optional[str]:
        """Block id at `coord` (e.g. "minecraft:fence"), or None for air."""
        ...


class WorldProbe:
    """
    Adapter from a WorldRegion to CellGrid solidity.

    Parameters:
        world:
            The world collaborator. Treated as a stable snapshot for the
            lifetime of a search.
        fence_like_blocks / liquid_blocks:
            Block ids that trigger the overlay rules.
    """

    def __init__(
        self,
        world: WorldRegion,
        *,
        fence_like_blocks: Iterable[str] = (),
        liquid_blocks: Iterable[str] = (),
    ) -> None:
        self._world = world
        self._fence_like: FrozenSet[str] = _normalized(fence_like_blocks)
        self._liquids: FrozenSet[str] = _normalized(liquid_blocks)
        self.queries: int = 0

    def is_solid(self, coord: Coord, grid: CellGrid) -> bool:
        """
        Classify `coord`, applying overlay side effects to `grid`.

        Never raises: query failures fold into "solid".
        """
        self.queries += 1
        try:
            if not self._world.region_valid_at(coord):
                return True

            block = self._world.block_at(coord)
            block_id = normalize_block_id(block)
            if block_id is not None:
                if block_id in self._fence_like:
                    grid.mark_solid(offset(coord, 0, 1, 0))
                if block_id in self._liquids:
                    grid.mark_solid(offset(coord, 0, -1, 0))

            return bool(self._world.solid_at(coord))
        except Exception:
            log.debug("world query failed at %s; treating as solid", coord, exc_info=True)
            return True


def _normalized(block_ids: Iterable[str]) -> FrozenSet[str]:
    return frozenset(
        bid for bid in (normalize_block_id(b) for b in block_ids) if bid is not None
    )


__all__ = ["WorldRegion", "WorldProbe"]
