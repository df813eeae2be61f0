# src/cli/pathfind.py
"""
Run one path search against a YAML world layout and print the result.

    voxel-pathfind config/worlds/demo.yaml --start 0 1 0 --end 10 1 0
    voxel-pathfind world.yaml --start 0 1 0 --end 40 1 12 --max-steps 200 --async

Exit status is 0 when a path is found, 1 when not, 2 on bad input.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path as FilePath
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import JsonFileLogger, log_event
from pathing.config import load_config
from pathing.logging_config import configure_logging
from pathing.path import Path
from pathing.types import PathStatus
from world.chunks import ChunkedWorld

log = logging.getLogger(__name__)

# Seconds between polls of a background search
POLL_INTERVAL_S = 0.01


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voxel-pathfind",
        description="Budgeted A* path search over a YAML voxel world layout.",
    )
    parser.add_argument("world", type=FilePath, help="YAML world layout file")
    parser.add_argument(
        "--start", nargs=3, type=float, required=True, metavar=("X", "Y", "Z")
    )
    parser.add_argument(
        "--end", nargs=3, type=float, required=True, metavar=("X", "Y", "Z")
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=100,
        help="Step budget; expansions allowed = calculations_per_step * max_steps",
    )
    parser.add_argument(
        "--async",
        dest="background",
        action="store_true",
        help="Compute on a background worker and poll for the result",
    )
    parser.add_argument("--config", type=FilePath, default=None, help="Alternate pathing.yaml")
    parser.add_argument(
        "--events", type=FilePath, default=None, help="Write search events as JSON lines"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def render_result(console: Console, path: Path, elapsed_s: float) -> None:
    status = path.status
    color = "green" if status is PathStatus.PATH_FOUND else "red"
    console.print(
        f"[bold {color}]{status.name}[/] "
        f"{path.source} -> {path.destination}  "
        f"expansions={path.expansions}  elapsed={elapsed_s * 1000:.1f}ms"
    )
    if status is not PathStatus.PATH_FOUND:
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("z", justify="right")
    table.add_column("g", justify="right")

    # Print source first, the order a mob walks it.
    points = list(reversed(path.points))
    costs = list(reversed(path.costs))
    for i, ((x, y, z), g) in enumerate(zip(points, costs)):
        table.add_row(str(i), str(x), str(y), str(z), str(g))
    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        logging.DEBUG if args.debug else logging.WARNING, trace_searches=args.debug
    )
    console = Console()

    try:
        config = load_config(args.config)
        world = ChunkedWorld.load_layout(args.world)
    except (FileNotFoundError, ValueError, TypeError) as exc:
        console.print(f"[bold red]error:[/] {exc}")
        return 2

    bus: Optional[EventBus] = None
    sinks: List[JsonFileLogger] = []
    if args.events is not None:
        bus = EventBus()
        sinks.append(JsonFileLogger(args.events, bus))

    started = time.perf_counter()
    try:
        with Path(
            world,
            tuple(args.start),
            tuple(args.end),
            args.max_steps,
            config=config,
            background=args.background,
            bus=bus,
        ) as path:
            if args.background:
                polls = 0
                while path.poll_async() is PathStatus.CALCULATING:
                    polls += 1
                    time.sleep(POLL_INTERVAL_S)
                log.debug("background search finished after %d polls", polls)
                if bus is not None:
                    log_event(
                        bus=bus,
                        module=__name__,
                        event_type=EventType.LOG,
                        message=f"Background search polled {polls} times",
                        payload={"polls": polls, "status": path.status.name},
                        correlation_id=path.search_id,
                    )
            else:
                path.step()
            render_result(console, path, time.perf_counter() - started)
            found = path.status is PathStatus.PATH_FOUND
    finally:
        for sink in sinks:
            sink.close()

    return 0 if found else 1


if __name__ == "__main__":
    sys.exit(main())
