# src/pathing/logging_config.py
"""
Logging setup for pathfinder entrypoints.

Library modules only ever do `log = logging.getLogger(__name__)`; handlers
are attached here, once, by whatever process embeds the pathfinder:

    from pathing.logging_config import configure_logging
    configure_logging("debug", trace_searches=True)

Loggers used by the package:
    pathing.path          search lifecycle, background failures
    pathing.world_probe   world query failures (treated as solid)
    pathing.search        one "search_done ..." line per finished search
    monitoring.*          event sink problems
"""

from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Per-search trace lines; chatty under a tick loop.
SEARCH_TRACE_LOGGER = "pathing.search"


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    trace_searches: bool = False,
) -> None:
    """
    Attach a stdout handler to the root logger and set levels.

    If the root logger already has handlers (an embedding application or
    pytest configured it), only the levels are adjusted.

    Args:
        level: root level, as an int or a name such as "debug"
        trace_searches: keep the per-search trace lines from pathing.search
    """
    root_level = _as_level(level)
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(root_level)

    trace_level = logging.INFO if trace_searches else max(root_level, logging.WARNING)
    logging.getLogger(SEARCH_TRACE_LOGGER).setLevel(trace_level)


__all__ = ["configure_logging", "LOG_FORMAT", "SEARCH_TRACE_LOGGER"]
