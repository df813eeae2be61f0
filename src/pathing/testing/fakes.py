# src/pathing/testing/fakes.py
"""
Test helpers for the pathing package.

Provides:
- FakeWorld: in-memory WorldRegion built from a solidity callback plus
  explicit block overrides, with call counting and unloadable columns.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Set, Tuple

from pathing.types import Coord

# Signature for a background solidity rule: is_solid(x, y, z) -> bool
SolidFn = Callable[[int, int, int], bool]

_SOLID_PLACEHOLDER = "test:solid"


def flat_floor(floor_y: int = 0) -> SolidFn:
    """Solid at floor_y everywhere, air above and below."""
    return lambda x, y, z: y == floor_y


class FakeWorld:
    """
    In-memory world for unit tests.

    - `solid_fn` decides solidity for any coordinate without an explicit block.
    - set_block() overrides single coordinates with a block id and solidity.
    - unload_column() makes (x, z) columns report region_valid_at() == False.
    - Every query is counted so tests can check how much was probed.
    """

    def __init__(self, solid_fn: Optional[SolidFn] = None) -> None:
        self._solid_fn: SolidFn = solid_fn or (lambda x, y, z: False)
        self._blocks: Dict[Coord, Tuple[Optional[str], bool]] = {}
        self._unloaded: Set[Tuple[int, int]] = set()
        self.queries: Dict[Coord, int] = {}

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def set_block(self, coord: Coord, block_id: Optional[str], solid: bool) -> None:
        self._blocks[coord] = (block_id, solid)

    def set_solid(self, coord: Coord) -> None:
        self.set_block(coord, _SOLID_PLACEHOLDER, True)

    def set_air(self, coord: Coord) -> None:
        self.set_block(coord, None, False)

    def unload_column(self, x: int, z: int) -> None:
        self._unloaded.add((x, z))

    # ------------------------------------------------------------------
    # WorldRegion protocol
    # ------------------------------------------------------------------

    def region_valid_at(self, coord: Coord) -> bool:
        self.queries[coord] = self.queries.get(coord, 0) + 1
        return (coord[0], coord[2]) not in self._unloaded

    def solid_at(self, coord: Coord) -> bool:
        entry = self._blocks.get(coord)
        if entry is not None:
            return entry[1]
        return bool(self._solid_fn(*coord))

    def block_at(self, coord: Coord) -> Optional[str]:
        entry = self._blocks.get(coord)
        if entry is not None:
            return entry[0]
        return _SOLID_PLACEHOLDER if self._solid_fn(*coord) else None


class ExplodingWorld(FakeWorld):
    """FakeWorld whose block queries raise inside a given column."""

    def __init__(self, column: Tuple[int, int], solid_fn: Optional[SolidFn] = None) -> None:
        super().__init__(solid_fn)
        self._column = column

    def solid_at(self, coord: Coord) -> bool:
        if (coord[0], coord[2]) == self._column:
            raise RuntimeError(f"chunk read failed at {coord}")
        return super().solid_at(coord)


__all__ = ["FakeWorld", "ExplodingWorld", "flat_floor"]
