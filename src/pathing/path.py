# budgeted / background path computation
# src/pathing/path.py
"""
Path: one resumable A* search between two world points.

A Path owns everything its search creates (CellGrid, Frontier, engine
state) and is the only public entry point of the package. Work is done in
bounded batches so a simulation tick never pays for a whole search:

    path = Path(world, mob_pos, target_pos, max_steps=20)
    status = path.step()                       # synchronous, bounded

or, off the tick thread:

    path = Path(world, mob_pos, target_pos, max_steps=20, background=True)
    ...
    if path.poll_async() is PathStatus.PATH_FOUND:    # each tick, non-blocking
        while not path.is_last_point():
            steer_towards(block_center(path.next_point()))

Once a search is terminal its cells are released; only the waypoints and
their costs survive.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import nullcontext
from typing import Any, ContextManager, List, Optional, Sequence

from monitoring.bus import EventBus
from monitoring.integration import (
    emit_async_launch_failed,
    emit_budget_exhausted,
    emit_search_finished,
    emit_search_rejected,
    emit_search_started,
)

from .cell_grid import CellGrid
from .config import PathfinderConfig, default_config
from .engine import SearchEngine
from .errors import PathfinderError
from .frontier import Frontier
from .tracing import SearchTracer, default_tracer
from .types import Coord, PathStatus, floor_coord
from .world_probe import WorldProbe, WorldRegion

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Debug-only single-thread access guard
# ---------------------------------------------------------------------------


class SingleThreadAccessChecker:
    """
    Context manager asserting that a Path is only used by one thread at a time.

    The Path stores the ident of the thread currently inside one of its
    operations. Entering asserts that slot is empty or already ours;
    leaving restores the previous value, so nested entries from the same
    thread are fine.
    """

    def __init__(self, owner: "Path") -> None:
        self._owner = owner
        self._previous: Optional[int] = None

    def __enter__(self) -> "SingleThreadAccessChecker":
        me = threading.get_ident()
        current = self._owner._thread_id
        assert current is None or current == me, (
            f"Path {self._owner.search_id} entered from thread {me} "
            f"while in use by thread {current}"
        )
        self._previous = current
        self._owner._thread_id = me
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._owner._thread_id = self._previous


# ---------------------------------------------------------------------------
# Shared background executor
# ---------------------------------------------------------------------------

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def shared_executor(max_workers: int = 2) -> ThreadPoolExecutor:
    """Lazily created process-wide pool for background searches."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="PathfinderWorker",
            )
        return _executor


def shutdown_shared_executor(wait: bool = True) -> None:
    """Shut the shared pool down; the next background search creates a new one."""
    global _executor
    with _executor_lock:
        pool, _executor = _executor, None
    if pool is not None:
        pool.shutdown(wait=wait)


# ---------------------------------------------------------------------------
# Path
# ---------------------------------------------------------------------------


class Path:
    """
    A single budgeted search from `start_point` to `end_point`.

    Parameters
    ----------
    world:
        WorldRegion to probe. Read as a stable snapshot; if the world
        changes mid-search the result may be stale.
    start_point / end_point:
        Continuous positions, floored to block coordinates.
    max_steps:
        Budget in scheduling steps; step() allows
        `calculations_per_step * max_steps` expansions.
    bounding_box_width / bounding_box_height / max_step_up / max_step_down:
        Movement envelope of the mob. Stored for callers; the search itself
        uses fixed one-block step and headroom rules.
    config:
        PathfinderConfig; defaults to the process-wide config.
    background:
        Launch step() on a worker immediately (see start_async()).
    executor:
        Executor for background runs; defaults to the shared pool.
    tracer / bus:
        Where finished searches are recorded / lifecycle events are sent.
    """

    def __init__(
        self,
        world: WorldRegion,
        start_point: Sequence[float],
        end_point: Sequence[float],
        max_steps: int,
        bounding_box_width: float = 1.0,
        bounding_box_height: float = 2.0,
        max_step_up: int = 1,
        max_step_down: int = 1,
        *,
        config: Optional[PathfinderConfig] = None,
        background: bool = False,
        executor: Optional[Executor] = None,
        tracer: Optional[SearchTracer] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._config = config or default_config()
        self.source: Coord = floor_coord(start_point)
        self.destination: Coord = floor_coord(end_point)
        self.max_steps = int(max_steps)

        self.bounding_box_width = float(bounding_box_width)
        self.bounding_box_height = float(bounding_box_height)
        self.max_step_up = int(max_step_up)
        self.max_step_down = int(max_step_down)

        self.search_id = uuid.uuid4().hex[:12]
        self._thread_id: Optional[int] = None
        self._tracer = tracer or default_tracer()
        self._bus = bus
        self._executor = executor
        self._started_at = time.perf_counter()

        self._probe = WorldProbe(
            world,
            fence_like_blocks=self._config.fence_like_blocks,
            liquid_blocks=self._config.liquid_blocks,
        )
        self._grid = CellGrid(self._probe)
        self._frontier = Frontier(self._grid)
        self._engine = SearchEngine(
            self._grid, self._frontier, self.source, self.destination, self._config
        )

        self._status = PathStatus.CALCULATING
        self._points: List[Coord] = []
        self._costs: List[int] = []
        self._cursor = 0
        self._finished = False

        self._future: Optional[Future] = None
        self._async_started = False
        self.launch_error: Optional[BaseException] = None

        with self._access():
            source_solid = self._grid.is_solid(self.source)
            destination_solid = self._grid.is_solid(self.destination)
            if source_solid or destination_solid:
                log.debug(
                    "rejecting search %s: source_solid=%s destination_solid=%s",
                    self.search_id,
                    source_solid,
                    destination_solid,
                )
                emit_search_rejected(
                    self._bus,
                    self.search_id,
                    self.source,
                    self.destination,
                    source_solid,
                    destination_solid,
                )
                self._finish(PathStatus.PATH_NOT_FOUND)
                return

            self._engine.open_source()

        emit_search_started(
            self._bus, self.search_id, self.source, self.destination, self.max_steps
        )

        if background:
            self.start_async()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def status(self) -> PathStatus:
        return self._status

    @property
    def config(self) -> PathfinderConfig:
        return self._config

    @property
    def expansions(self) -> int:
        """Cells popped from the frontier so far."""
        return self._engine.expansions

    @property
    def cells_cached(self) -> int:
        """Cells currently held by the grid (0 after teardown)."""
        return len(self._grid)

    @property
    def step_budget(self) -> int:
        return self._config.calculations_per_step * self.max_steps

    # ------------------------------------------------------------------
    # Synchronous stepping
    # ------------------------------------------------------------------

    def run_budgeted(self, max_calculations: int, *, give_up: bool = True) -> PathStatus:
        """
        Advance the search by at most `max_calculations` expansions.

        Returns the terminal status as soon as one is reached. If the budget
        runs out first the search fails with PATH_NOT_FOUND, unless
        `give_up` is False, in which case it stays CALCULATING and the next
        call resumes where this one stopped.
        """
        if self._status.is_terminal:
            return self._status
        if self._future is not None and not self._future.done():
            raise PathfinderError(
                "async_in_flight", {"search_id": self.search_id}
            )
        with self._access():
            return self._run(max_calculations, give_up)

    def step(self) -> PathStatus:
        """Run the whole per-instance budget synchronously."""
        return self.run_budgeted(self.step_budget)

    def _run(self, max_calculations: int, give_up: bool) -> PathStatus:
        for _ in range(max_calculations):
            if self._engine.advance_one():
                self._finish(self._engine.status)
                return self._status

        if give_up:
            emit_budget_exhausted(
                self._bus, self.search_id, max_calculations, self._engine.expansions
            )
            self._finish(PathStatus.PATH_NOT_FOUND)
        return self._status

    # ------------------------------------------------------------------
    # Background computation
    # ------------------------------------------------------------------

    def start_async(self, executor: Optional[Executor] = None) -> None:
        """
        Hand step() to a worker thread. One launch per Path.

        While the worker runs nothing else may touch this Path except
        poll_async(), wait() and close(). If the worker cannot be scheduled
        the failure is logged and the Path ends as PATH_NOT_FOUND with
        `launch_error` set.
        """
        if self._async_started:
            raise PathfinderError(
                "async_already_started", {"search_id": self.search_id}
            )
        self._async_started = True

        if self._status.is_terminal:
            return

        pool = executor or self._executor or shared_executor(self._config.max_workers)
        try:
            self._future = pool.submit(self._background_step)
        except RuntimeError as exc:
            log.exception("could not launch background search %s", self.search_id)
            self.launch_error = exc
            emit_async_launch_failed(self._bus, self.search_id, exc)
            self._finish(PathStatus.PATH_NOT_FOUND)

    def _background_step(self) -> PathStatus:
        try:
            with self._access():
                return self._run(self.step_budget, give_up=True)
        except Exception:
            log.exception("background search %s failed", self.search_id)
            self._finish(PathStatus.PATH_NOT_FOUND)
            raise

    def poll_async(self) -> PathStatus:
        """
        Non-blocking check on the background run.

        CALCULATING while the worker is busy; otherwise the terminal status.
        An exception raised inside the worker is re-raised here once.
        """
        future = self._future
        if future is None:
            return self._status
        if not future.done():
            return PathStatus.CALCULATING
        self._future = None
        return future.result()

    def wait(self, timeout: Optional[float] = None) -> PathStatus:
        """Block until the background run finishes (or `timeout` expires)."""
        future = self._future
        if future is None:
            return self._status
        status = future.result(timeout=timeout)
        self._future = None
        return status

    @property
    def in_flight(self) -> bool:
        return self._future is not None and not self._future.done()

    # ------------------------------------------------------------------
    # Waypoints
    # ------------------------------------------------------------------

    @property
    def points(self) -> List[Coord]:
        """Waypoints from the cell next to the destination back to the source."""
        return list(self._points)

    @property
    def costs(self) -> List[int]:
        """Accumulated g for each entry of `points`."""
        return list(self._costs)

    def point_count(self) -> int:
        return len(self._points)

    def point(self, index: int) -> Coord:
        """Waypoint `index` in `points` order (0 = next to the destination)."""
        self._require_found()
        if not 0 <= index < len(self._points):
            raise PathfinderError(
                "index_out_of_range", {"index": index, "count": len(self._points)}
            )
        return self._points[index]

    def current_point(self) -> Coord:
        self._require_found()
        return self._points[len(self._points) - 1 - self._cursor]

    def next_point(self) -> Coord:
        """
        Advance the cursor one waypoint toward the destination and return it.

        The cursor starts on the source, so the first call returns the
        second waypoint.
        """
        self._require_found()
        if self.is_last_point():
            raise PathfinderError(
                "cursor_exhausted", {"count": len(self._points)}
            )
        with self._access():
            self._cursor += 1
            return self._points[len(self._points) - 1 - self._cursor]

    def is_first_point(self) -> bool:
        return self._cursor == 0

    def is_last_point(self) -> bool:
        return self._cursor >= len(self._points) - 1

    def reset_cursor(self) -> None:
        self._cursor = 0

    def _require_found(self) -> None:
        if self._status is not PathStatus.PATH_FOUND:
            raise PathfinderError(
                "no_path", {"search_id": self.search_id, "status": self._status.name}
            )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Release the search.

        A background run in flight is not interrupted; close() waits for it
        to finish on its own. A search still CALCULATING ends as
        PATH_NOT_FOUND. Safe to call any number of times.
        """
        future, self._future = self._future, None
        if future is not None:
            try:
                future.result()
            except Exception as exc:
                # Already logged by the worker; close() must still release.
                log.debug("closing search %s after worker error %r", self.search_id, exc)

        with self._access():
            if self._status is PathStatus.CALCULATING:
                self._finish(PathStatus.PATH_NOT_FOUND)
            else:
                self._teardown()

    def __enter__(self) -> "Path":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _finish(self, status: PathStatus) -> None:
        self._status = status
        if status is PathStatus.PATH_FOUND:
            self._points = list(self._engine.points)
            self._costs = list(self._engine.costs)
        cells_created = len(self._grid)
        self._teardown()

        if self._finished:
            return
        self._finished = True

        path_cost = self._costs[0] if self._costs else None
        self._tracer.record(
            source=self.source,
            destination=self.destination,
            status=status,
            expansions=self._engine.expansions,
            cells_created=cells_created,
            path_length=len(self._points),
            path_cost=path_cost,
            duration_s=time.perf_counter() - self._started_at,
            background=self._async_started,
        )
        emit_search_finished(
            self._bus,
            self.search_id,
            status.name,
            self._engine.expansions,
            len(self._points),
            path_cost,
        )

    def _teardown(self) -> None:
        self._grid.clear()
        self._frontier.clear()

    def _access(self) -> ContextManager[Any]:
        if self._config.check_thread_access:
            return SingleThreadAccessChecker(self)
        return nullcontext()

    def __repr__(self) -> str:
        return (
            f"Path(id={self.search_id}, {self.source} -> {self.destination}, "
            f"status={self._status.name}, expansions={self._engine.expansions})"
        )


__all__ = [
    "Path",
    "SingleThreadAccessChecker",
    "shared_executor",
    "shutdown_shared_executor",
]
