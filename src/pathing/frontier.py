# src/pathing/frontier.py
"""
Frontier: the A* open list.

A binary heap of (f, sequence, handle) entries over a CellGrid. The heap
never owns cells; it only stores arena handles. Cost decreases re-insert
the cell with its new f and leave the old entry behind; stale entries are
recognized on pop because their cell is already CLOSED or their f no
longer matches.

Ordering among equal-f cells is not part of the contract.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Iterator, List, Optional, Tuple

from .cell_grid import CellGrid, CellHandle
from .types import CellStatus

_Entry = Tuple[int, int, CellHandle]


class Frontier:
    def __init__(self, grid: CellGrid) -> None:
        self._grid = grid
        self._heap: List[_Entry] = []
        self._counter: Iterator[int] = itertools.count()
        self._open_count = 0

    def push(self, handle: CellHandle) -> None:
        """Mark the cell OPEN and insert it by its current f."""
        cell = self._grid.cell(handle)
        if cell.status is CellStatus.CLOSED:
            raise ValueError(f"cannot re-open closed cell at {cell.location}")
        if cell.status is CellStatus.UNVISITED:
            self._open_count += 1
        cell.status = CellStatus.OPEN
        heapq.heappush(self._heap, (cell.f, next(self._counter), handle))

    def update(self, handle: CellHandle) -> None:
        """Reflect a lowered f for a cell that is already OPEN."""
        cell = self._grid.cell(handle)
        if cell.status is not CellStatus.OPEN:
            return
        heapq.heappush(self._heap, (cell.f, next(self._counter), handle))

    def pop_min(self) -> Optional[CellHandle]:
        """
        Remove and return the open cell with the lowest f, marking it CLOSED.

        Returns None once no open cells remain.
        """
        while self._heap:
            f, _, handle = heapq.heappop(self._heap)
            cell = self._grid.cell(handle)
            if cell.status is not CellStatus.OPEN or cell.f != f:
                continue
            cell.status = CellStatus.CLOSED
            self._open_count -= 1
            return handle
        return None

    def clear(self) -> None:
        self._heap = []
        self._open_count = 0

    def __len__(self) -> int:
        """Number of cells currently OPEN."""
        return self._open_count

    def __bool__(self) -> bool:
        return self._open_count > 0


__all__ = ["Frontier"]
