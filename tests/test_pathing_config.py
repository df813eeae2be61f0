# tests/test_pathing_config.py
"""
Tests for pathing.config: defaults, YAML loading and env overrides.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pathing import config as config_mod
from pathing.config import PathfinderConfig, default_config, load_config


def write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_builtin_defaults() -> None:
    cfg = PathfinderConfig()

    assert cfg.calculations_per_step == 5
    assert cfg.heuristic == "euclidean"
    assert cfg.greedy is False
    assert cfg.check_thread_access is False
    assert "minecraft:fence" in cfg.fence_like_blocks
    assert cfg.liquid_blocks == ("minecraft:water",)


def test_repo_config_file_matches_defaults() -> None:
    assert config_mod.DEFAULT_CONFIG_PATH.exists()
    assert load_config() == PathfinderConfig()


def test_nested_and_bare_mappings_are_accepted(tmp_path: Path) -> None:
    nested = write_yaml(
        tmp_path / "nested.yaml",
        "pathing:\n  calculations_per_step: 8\n  heuristic: Manhattan\n",
    )
    bare = write_yaml(tmp_path / "bare.yaml", "greedy: true\nliquid_blocks: []\n")

    a = load_config(nested)
    b = load_config(bare)

    assert a.calculations_per_step == 8
    assert a.heuristic == "manhattan"
    assert b.greedy is True
    assert b.liquid_blocks == ()
    # Unlisted keys keep their defaults.
    assert b.calculations_per_step == 5


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(write_yaml(tmp_path / "empty.yaml", "")) == PathfinderConfig()


@pytest.mark.parametrize(
    "text",
    [
        "heuristic: dijkstra\n",
        "calculations_per_step: 0\n",
        "max_workers: 0\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_raises_value_error(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        load_config(write_yaml(tmp_path / "bad.yaml", text))


def test_missing_explicit_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_env_var_selects_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = write_yaml(tmp_path / "env.yaml", "pathing:\n  max_workers: 4\n")
    monkeypatch.setenv("PATHING_CONFIG", str(path))

    assert load_config().max_workers == 4


def test_env_var_pointing_nowhere_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATHING_CONFIG", str(tmp_path / "missing.yaml"))

    with pytest.raises(FileNotFoundError):
        load_config()


@pytest.mark.parametrize("value", ["1", "true", "YES"])
def test_debug_threads_env_forces_guard(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("PATHING_DEBUG_THREADS", value)

    assert load_config().check_thread_access is True


def test_default_config_is_cached() -> None:
    first = default_config()

    assert default_config() is first

    config_mod._reset_config_for_tests()
    assert default_config() is not first


def test_block_ids_are_normalized(tmp_path: Path) -> None:
    path = write_yaml(
        tmp_path / "ids.yaml",
        "fence_like_blocks:\n"
        "  - fence\n"
        "  - Minecraft:Fence_Gate\n"
        "  - gregtech:frame\n"
        "liquid_blocks: [water]\n",
    )

    cfg = load_config(path)

    assert cfg.fence_like_blocks == (
        "minecraft:fence",
        "minecraft:fence_gate",
        "gregtech:frame",
    )
    assert cfg.liquid_blocks == ("minecraft:water",)


@pytest.mark.parametrize(
    "text",
    [
        "fence_like_blocks: minecraft:fence\n",
        "liquid_blocks: water\n",
        "fence_like_blocks: [fence, air]\n",
        "liquid_blocks: [3]\n",
    ],
)
def test_malformed_block_id_lists_raise(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        load_config(write_yaml(tmp_path / "ids.yaml", text))
