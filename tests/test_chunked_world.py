# tests/test_chunked_world.py
"""
Tests for world.chunks.ChunkedWorld and world.blocks, plus searches run
against a chunked world built from a YAML layout.
"""

from __future__ import annotations

from pathlib import Path as FilePath

import pytest

from pathing.config import PathfinderConfig
from pathing.path import Path
from pathing.tracing import SearchTracer
from pathing.types import PathStatus
from world.blocks import is_solid_block, normalize_block_id
from world.chunks import CHUNK_WIDTH, ChunkedWorld, chunk_key

CFG = PathfinderConfig()

DEMO_LAYOUT = FilePath(__file__).resolve().parents[1] / "config" / "worlds" / "demo.yaml"


def search(world, start, end, max_steps: int = 500) -> Path:
    path = Path(world, start, end, max_steps, config=CFG, tracer=SearchTracer())
    path.step()
    return path


# ---------------------------------------------------------------------------
# Block ids
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("", None),
        ("air", None),
        ("minecraft:air", None),
        ("stone", "minecraft:stone"),
        (" Minecraft:Fence ", "minecraft:fence"),
        ("gregtech:machine", "gregtech:machine"),
        ({"id": "minecraft:dirt"}, "minecraft:dirt"),
        ({"name": "glass"}, "minecraft:glass"),
    ],
)
def test_normalize_block_id(raw, expected) -> None:
    assert normalize_block_id(raw) == expected


def test_normalize_block_id_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        normalize_block_id(42)


def test_solidity_classification() -> None:
    assert is_solid_block("minecraft:stone")
    assert is_solid_block("minecraft:fence")
    assert not is_solid_block(None)
    assert not is_solid_block("minecraft:water")
    assert not is_solid_block("minecraft:tallgrass")


# ---------------------------------------------------------------------------
# Chunk storage
# ---------------------------------------------------------------------------


def test_chunk_key_uses_floor_division() -> None:
    assert chunk_key(0, 0) == (0, 0)
    assert chunk_key(CHUNK_WIDTH - 1, CHUNK_WIDTH) == (0, 1)
    assert chunk_key(-1, -CHUNK_WIDTH) == (-1, -1)
    assert chunk_key(-CHUNK_WIDTH - 1, 0) == (-2, 0)


def test_set_block_loads_chunk_and_reads_back() -> None:
    world = ChunkedWorld()
    world.set_block((-3, 10, 20), "stone")

    assert (-1, 1) in world.loaded_chunks()
    assert world.block_at((-3, 10, 20)) == "minecraft:stone"
    assert world.solid_at((-3, 10, 20)) is True
    assert world.block_at((-3, 11, 20)) is None
    assert world.region_valid_at((-3, 11, 20)) is True
    # Neighbouring chunk was never touched.
    assert world.region_valid_at((0, 10, 20)) is False


def test_setting_air_clears_block() -> None:
    world = ChunkedWorld()
    world.set_block((1, 1, 1), "stone")
    world.set_block((1, 1, 1), "air")

    assert world.block_at((1, 1, 1)) is None
    assert world.solid_at((1, 1, 1)) is False


def test_out_of_height_coordinates() -> None:
    world = ChunkedWorld(height=16)
    world.load_chunk(0, 0)

    assert world.region_valid_at((0, -1, 0)) is False
    assert world.region_valid_at((0, 16, 0)) is False
    with pytest.raises(ValueError):
        world.set_block((0, 16, 0), "stone")


def test_unload_and_invalidate_chunk() -> None:
    world = ChunkedWorld()
    world.set_block((1, 0, 1), "stone")
    world.set_block((17, 0, 1), "stone")

    world.invalidate_chunk(0, 0)
    world.unload_chunk(1, 0)

    assert world.region_valid_at((1, 0, 1)) is False
    assert world.block_at((1, 0, 1)) == "minecraft:stone"  # data kept
    assert world.region_valid_at((17, 0, 1)) is False
    assert world.block_at((17, 0, 1)) is None


def test_fill_is_inclusive_and_corner_order_free() -> None:
    world = ChunkedWorld()
    count = world.fill((2, 0, 2), (0, 1, 0), "stone")

    assert count == 3 * 2 * 3
    assert world.solid_at((0, 0, 0)) and world.solid_at((2, 1, 2))
    assert not world.solid_at((3, 0, 0))


def test_from_layout() -> None:
    world = ChunkedWorld.from_layout(
        {
            "height": 64,
            "chunks": [[5, 5]],
            "fill": [{"from": [0, 0, 0], "to": [3, 0, 0], "block": "stone"}],
            "blocks": [{"at": [1, 0, 0], "block": "air"}],
            "unloaded_chunks": [[0, 0]],
        }
    )

    assert world.height == 64
    assert (5, 5) in world.loaded_chunks()
    assert world.region_valid_at((0, 0, 0)) is False


@pytest.mark.parametrize(
    "layout",
    [
        {"fill": [{"from": [0, 0], "to": [1, 1, 1], "block": "stone"}]},
        {"blocks": [{"block": "stone"}]},
        {"chunks": [[1, 2, 3]]},
    ],
)
def test_from_layout_rejects_malformed_entries(layout) -> None:
    with pytest.raises(ValueError):
        ChunkedWorld.from_layout(layout)


def test_load_layout_missing_file(tmp_path: FilePath) -> None:
    with pytest.raises(FileNotFoundError):
        ChunkedWorld.load_layout(tmp_path / "missing.yaml")


# ---------------------------------------------------------------------------
# Searching a chunked world
# ---------------------------------------------------------------------------


def test_demo_layout_path_goes_through_fence_gap() -> None:
    world = ChunkedWorld.load_layout(DEMO_LAYOUT)

    path = search(world, (0, 1, 0), (10, 1, 0))

    assert path.status is PathStatus.PATH_FOUND
    crossing = [p for p in path.points if p[0] == 5]
    assert crossing == [(5, 1, 3)]
    assert all(y == 1 for (_, y, _) in path.points)


def test_search_crosses_chunk_boundary_at_negative_coords() -> None:
    world = ChunkedWorld()
    world.fill((-20, 0, -2), (4, 0, 2), "stone")

    path = search(world, (2.5, 1.0, 0.5), (-18, 1, 0))

    assert path.status is PathStatus.PATH_FOUND
    assert path.points[0] == (-17, 1, 0)


def test_unloaded_chunk_blocks_the_only_route() -> None:
    world = ChunkedWorld()
    # A 3-wide stone causeway from chunk (0, 0) through (1, 0) into (2, 0).
    world.fill((0, 0, 0), (40, 0, 2), "stone")
    assert search(world, (1, 1, 1), (38, 1, 1)).status is PathStatus.PATH_FOUND

    world.unload_chunk(1, 0)

    assert search(world, (1, 1, 1), (38, 1, 1)).status is PathStatus.PATH_NOT_FOUND


def test_bare_fence_ids_in_config_still_block_the_ring() -> None:
    fence_ring = [
        {"at": [x, 1, z], "block": "fence"}
        for x in range(-2, 3)
        for z in range(-2, 3)
        if max(abs(x), abs(z)) == 2
    ]
    world = ChunkedWorld.from_layout(
        {"fill": [{"from": [-8, 0, -8], "to": [8, 0, 8], "block": "stone"}], "blocks": fence_ring}
    )
    config = PathfinderConfig.from_dict({"fence_like_blocks": ["fence"]})

    path = Path(world, (0, 1, 0), (6, 1, 0), 500, config=config, tracer=SearchTracer())

    assert path.step() is PathStatus.PATH_NOT_FOUND
    assert path.expansions == 9
