# src/pathing/config.py
"""
Configuration for the pathfinder.

Defaults live in config/pathing.yaml at the project root. Two environment
variables adjust loading:

    PATHING_CONFIG         path to an alternate YAML file
    PATHING_DEBUG_THREADS  "1"/"true" forces the single-thread access guard on

Usage:

    from pathing.config import default_config, load_config

    cfg = default_config()                        # cached, process-wide
    cfg = load_config(Path("my_pathing.yaml"))    # explicit file
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from world.blocks import normalize_block_id


PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "pathing.yaml"

HEURISTICS = ("euclidean", "manhattan")

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class PathfinderConfig:
    """Tunable knobs for a search. Movement rules themselves are fixed."""

    # advance_one() calls allowed per unit of a Path's max_steps budget
    calculations_per_step: int = 5

    # "euclidean" keeps paths optimal; "manhattan" is cheaper but less accurate
    heuristic: str = "euclidean"

    # f = h instead of f = g + h; much faster, no optimality
    greedy: bool = False

    check_thread_access: bool = False

    # worker threads in the shared background executor
    max_workers: int = 2

    # Blocks whose top is treated as solid (mobs cannot stand on a fence).
    fence_like_blocks: Tuple[str, ...] = (
        "minecraft:fence",
        "minecraft:fence_gate",
        "minecraft:nether_brick_fence",
    )

    # Blocks whose underside is treated as solid (stationary liquid).
    liquid_blocks: Tuple[str, ...] = ("minecraft:water",)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PathfinderConfig":
        """Build a config from a plain mapping (e.g. parsed YAML)."""
        defaults = cls()
        cfg = cls(
            calculations_per_step=int(
                data.get("calculations_per_step", defaults.calculations_per_step)
            ),
            heuristic=str(data.get("heuristic", defaults.heuristic)).lower(),
            greedy=bool(data.get("greedy", defaults.greedy)),
            check_thread_access=bool(
                data.get("check_thread_access", defaults.check_thread_access)
            ),
            max_workers=int(data.get("max_workers", defaults.max_workers)),
            fence_like_blocks=_block_ids(
                data.get("fence_like_blocks", defaults.fence_like_blocks), "fence_like_blocks"
            ),
            liquid_blocks=_block_ids(
                data.get("liquid_blocks", defaults.liquid_blocks), "liquid_blocks"
            ),
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.calculations_per_step < 1:
            raise ValueError(
                f"calculations_per_step must be >= 1, got {self.calculations_per_step}"
            )
        if self.heuristic not in HEURISTICS:
            raise ValueError(
                f"heuristic must be one of {HEURISTICS}, got {self.heuristic!r}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


def _block_ids(value: Any, key: str) -> Tuple[str, ...]:
    """Normalize a list of block ids ("fence" -> "minecraft:fence")."""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list of block ids, got {value!r}")
    ids = []
    for entry in value:
        try:
            block_id = normalize_block_id(entry)
        except TypeError as exc:
            raise ValueError(f"{key}: {exc}") from exc
        if block_id is None:
            raise ValueError(f"{key}: air is not a valid entry, got {entry!r}")
        ids.append(block_id)
    return tuple(ids)


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping; an empty file is an empty mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    # Allow either a bare mapping or one nested under "pathing:".
    nested = data.get("pathing")
    if isinstance(nested, dict):
        return nested
    return data


def _debug_threads_forced() -> bool:
    return os.getenv("PATHING_DEBUG_THREADS", "").strip().lower() in _TRUTHY


def load_config(path: Optional[Path] = None) -> PathfinderConfig:
    """
    Load a PathfinderConfig.

    Resolution order:
      1. explicit `path` (must exist)
      2. $PATHING_CONFIG (must exist)
      3. config/pathing.yaml if present, otherwise built-in defaults
    """
    if path is None:
        env_path = os.getenv("PATHING_CONFIG")
        if env_path:
            path = Path(env_path)

    if path is not None:
        cfg = PathfinderConfig.from_dict(_load_yaml(Path(path)))
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = PathfinderConfig.from_dict(_load_yaml(DEFAULT_CONFIG_PATH))
    else:
        cfg = PathfinderConfig()

    if _debug_threads_forced() and not cfg.check_thread_access:
        cfg = replace(cfg, check_thread_access=True)
    return cfg


_default_config: Optional[PathfinderConfig] = None


def default_config() -> PathfinderConfig:
    """
    Return a process-local PathfinderConfig singleton.

    First call reads the YAML file, subsequent calls return the same instance.
    """
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def _reset_config_for_tests() -> None:
    """Drop the cached default config. Only meant for test isolation."""
    global _default_config
    _default_config = None


__all__ = [
    "PathfinderConfig",
    "HEURISTICS",
    "load_config",
    "default_config",
]
