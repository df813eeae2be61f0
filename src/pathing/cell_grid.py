# sparse coordinate -> Cell cache for one search
# src/pathing/cell_grid.py
"""
CellGrid: lazily populated cell cache for a single search.

The grid is an arena: Cells live in a flat list and are referred to by
integer handles (their index). Parent links and the Frontier store handles,
never Cell objects, so the whole search state can be dropped at once by
clear().

Solidity is asked of a probe exactly once per coordinate, on creation.
The probe may, as a side effect, force *other* coordinates solid through
mark_solid(); if that coordinate has no cell yet the mark is kept as a
pending overlay and applied when the cell is created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Set

from .types import CellStatus, Coord

# Integer index into CellGrid's arena
CellHandle = int


class SolidityProbe(Protocol):
    """Anything that can classify a coordinate, with overlay access to the grid."""

    def is_solid(self, coord: Coord, grid: "CellGrid") -> bool:
        ...


@dataclass
class Cell:
    """Search-time record for one world coordinate."""

    location: Coord
    is_solid: bool
    f: int = 0
    g: int = 0
    h: int = 0
    status: CellStatus = CellStatus.UNVISITED
    parent: Optional[CellHandle] = None


class CellGrid:
    """
    Sparse mapping from world coordinate to Cell.

    No eviction: a grid lives exactly as long as its search and is torn
    down atomically by clear().
    """

    def __init__(self, probe: SolidityProbe) -> None:
        self._probe = probe
        self._cells: List[Cell] = []
        self._index: Dict[Coord, CellHandle] = {}
        # Overlay marks for coordinates that have no cell yet
        self._pending_solid: Set[Coord] = set()

    # ------------------------------------------------------------------
    # Core queries
    # ------------------------------------------------------------------

    def get_or_create(self, coord: Coord) -> CellHandle:
        """Return the handle for `coord`, creating and probing the cell if needed."""
        handle = self._index.get(coord)
        if handle is not None:
            return handle

        solid = bool(self._probe.is_solid(coord, self))
        if coord in self._pending_solid:
            self._pending_solid.discard(coord)
            solid = True

        handle = len(self._cells)
        self._cells.append(Cell(location=coord, is_solid=solid))
        self._index[coord] = handle
        return handle

    def cell(self, handle: CellHandle) -> Cell:
        return self._cells[handle]

    def cell_at(self, coord: Coord) -> Cell:
        """Shorthand for cell(get_or_create(coord))."""
        return self._cells[self.get_or_create(coord)]

    def lookup(self, coord: Coord) -> Optional[Cell]:
        """Return the cached cell for `coord` without probing, or None."""
        handle = self._index.get(coord)
        if handle is None:
            return None
        return self._cells[handle]

    def is_solid(self, coord: Coord) -> bool:
        return self.cell_at(coord).is_solid

    def mark_solid(self, coord: Coord) -> None:
        """
        Force `coord` solid.

        Applied immediately if the cell exists, otherwise recorded and
        applied when the cell is created.
        """
        handle = self._index.get(coord)
        if handle is not None:
            self._cells[handle].is_solid = True
        else:
            self._pending_solid.add(coord)

    def trace_back(self, handle: CellHandle) -> List[CellHandle]:
        """Handles along the parent chain, starting at `handle` and ending at the root."""
        chain: List[CellHandle] = []
        current: Optional[CellHandle] = handle
        while current is not None:
            chain.append(current)
            current = self._cells[current].parent
        return chain

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Release every cell and pending overlay. Safe to call repeatedly."""
        self._cells.clear()
        self._index.clear()
        self._pending_solid.clear()

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._index


__all__ = ["Cell", "CellGrid", "CellHandle", "SolidityProbe"]
