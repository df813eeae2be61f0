# A* expansion loop over CellGrid
# src/pathing/engine.py
"""
SearchEngine: one A* expansion per advance_one() call.

Movement policy (fixed, not pluggable):
- 4 cardinal moves (+-x, +-z), each tried one block down, level and one
  block up, cost 10.
- 4 diagonal moves at the current height only, cost 14 (~10 * sqrt(2)),
  allowed only when both corner cells are open and both cells under the
  corners are solid. The first rule stops corner cutting through walls,
  the second stops shortcuts across a gap at a sharp turn of a bridge.
- A candidate must be walkable: non-solid, solid floor below, non-solid
  headroom above. Non-walkable candidates are dropped outright.

The search stops when a cell next to the destination is popped (the 4
cardinal neighbours at destination height, or the cell right below it).
The destination cell itself is never the end of a path.
"""

from __future__ import annotations

import math
from typing import List, Optional

from .cell_grid import Cell, CellGrid, CellHandle
from .config import PathfinderConfig
from .frontier import Frontier
from .types import CellStatus, Coord, PathStatus, offset

ORTHOGONAL_COST = 10
DIAGONAL_COST = 14

_CARDINALS = ((1, 0), (-1, 0), (0, 1), (0, -1))
_DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def destination_neighbours(destination: Coord) -> tuple[Coord, ...]:
    """The cells whose expansion ends the search."""
    return (
        offset(destination, 0, 0, 1),
        offset(destination, 1, 0, 0),
        offset(destination, -1, 0, 0),
        offset(destination, 0, 0, -1),
        offset(destination, 0, -1, 0),
    )


class SearchEngine:
    """
    A* core over a CellGrid / Frontier pair.

    The engine owns no resources: the grid and frontier are handed in by
    the Path that owns them, and teardown is the Path's job.
    """

    def __init__(
        self,
        grid: CellGrid,
        frontier: Frontier,
        source: Coord,
        destination: Coord,
        config: PathfinderConfig,
    ) -> None:
        self.grid = grid
        self.frontier = frontier
        self.source = source
        self.destination = destination

        self._manhattan = config.heuristic == "manhattan"
        self._greedy = config.greedy
        self._goal_cells = frozenset(destination_neighbours(destination))

        self.status = PathStatus.CALCULATING
        self.expansions = 0
        # Filled on PATH_FOUND: near-destination cell first, source last
        self.points: List[Coord] = []
        self.costs: List[int] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open_source(self) -> None:
        """Seed the frontier with the source cell (g = 0, no parent)."""
        self._process_cell(self.grid.get_or_create(self.source), None, 0)

    def advance_one(self) -> bool:
        """
        Expand the best open cell.

        Returns True once the status is terminal, False if more work remains.
        """
        if self.status.is_terminal:
            return True

        handle = self.frontier.pop_min()
        if handle is None:
            self.status = PathStatus.PATH_NOT_FOUND
            return True

        self.expansions += 1
        current = self.grid.cell(handle)

        if current.location in self._goal_cells:
            self._collect_path(handle)
            self.status = PathStatus.PATH_FOUND
            return True

        self._expand(handle)
        return False

    def heuristic(self, coord: Coord) -> int:
        dx = coord[0] - self.destination[0]
        dy = coord[1] - self.destination[1]
        dz = coord[2] - self.destination[2]
        if self._manhattan:
            return ORTHOGONAL_COST * (abs(dx) + abs(dy) + abs(dz))
        return int(math.sqrt(dx * dx + dy * dy + dz * dz) * ORTHOGONAL_COST)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _expand(self, handle: CellHandle) -> None:
        location = self.grid.cell(handle).location

        for dy in (-1, 0, 1):
            for dx, dz in _CARDINALS:
                self._process_if_walkable(offset(location, dx, dy, dz), handle, ORTHOGONAL_COST)

        is_solid = self.grid.is_solid
        for dx, dz in _DIAGONALS:
            # Corners must be open, and both must have ground under them.
            if is_solid(offset(location, dx, 0, 0)) or is_solid(offset(location, 0, 0, dz)):
                continue
            if not (is_solid(offset(location, dx, -1, 0)) and is_solid(offset(location, 0, -1, dz))):
                continue
            self._process_if_walkable(offset(location, dx, 0, dz), handle, DIAGONAL_COST)

    def is_walkable(self, coord: Coord) -> bool:
        """Non-solid, with a solid floor beneath and clear headroom above."""
        # Probe all three cells before reading any flag: probing one of them
        # can force another solid (fence below, liquid above).
        grid = self.grid
        floor = grid.get_or_create(offset(coord, 0, -1, 0))
        body = grid.get_or_create(coord)
        head = grid.get_or_create(offset(coord, 0, 1, 0))
        return (
            not grid.cell(body).is_solid
            and grid.cell(floor).is_solid
            and not grid.cell(head).is_solid
        )

    def _process_if_walkable(self, coord: Coord, parent: CellHandle, cost: int) -> None:
        if self.is_walkable(coord):
            self._process_cell(self.grid.get_or_create(coord), parent, cost)

    def _process_cell(self, handle: CellHandle, parent: Optional[CellHandle], g_delta: int) -> None:
        cell = self.grid.cell(handle)

        if cell.status is CellStatus.CLOSED:
            return

        new_g = 0 if parent is None else self.grid.cell(parent).g + g_delta

        if cell.status is CellStatus.UNVISITED:
            cell.parent = parent
            self._set_costs(cell, new_g)
            self.frontier.push(handle)
            return

        # OPEN: keep the cheaper route; h is recomputed from geometry.
        if new_g < cell.g:
            cell.parent = parent
            self._set_costs(cell, new_g)
            self.frontier.update(handle)

    def _set_costs(self, cell: Cell, g: int) -> None:
        cell.g = g
        cell.h = self.heuristic(cell.location)
        cell.f = cell.h if self._greedy else cell.g + cell.h

    def _collect_path(self, handle: CellHandle) -> None:
        self.points = []
        self.costs = []
        for h in self.grid.trace_back(handle):
            cell = self.grid.cell(h)
            self.points.append(cell.location)
            self.costs.append(cell.g)


__all__ = [
    "SearchEngine",
    "ORTHOGONAL_COST",
    "DIAGONAL_COST",
    "destination_neighbours",
]
