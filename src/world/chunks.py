# chunked voxel storage implementing the pathfinder's WorldRegion
# src/world/chunks.py
"""
ChunkedWorld: a minimal chunked block store.

The world is split into 16-wide columns (chunks) keyed by (chunk_x,
chunk_z). A chunk that was never loaded, was unloaded, or is marked
invalid makes every coordinate inside it unknown, and the pathfinder
treats unknown terrain as solid.

This module only stores blocks. It has no opinion about paths; the
pathing package consumes it through region_valid_at / solid_at / block_at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import yaml

from .blocks import is_solid_block, normalize_block_id

log = logging.getLogger(__name__)

CHUNK_WIDTH = 16
WORLD_HEIGHT = 256

Coord = Tuple[int, int, int]
ChunkKey = Tuple[int, int]


@dataclass
class Chunk:
    """
    One 16 x WORLD_HEIGHT x 16 column of blocks.

    Blocks are stored sparsely by chunk-local coordinate; absent means air.
    """

    x: int
    z: int
    blocks: Dict[Coord, str] = field(default_factory=dict)
    valid: bool = True

    def get(self, local: Coord) -> Optional[str]:
        return self.blocks.get(local)

    def set(self, local: Coord, block_id: Optional[str]) -> None:
        if block_id is None:
            self.blocks.pop(local, None)
        else:
            self.blocks[local] = block_id


def chunk_key(x: int, z: int) -> ChunkKey:
    """Chunk holding world column (x, z). Floor division keeps negatives right."""
    return x // CHUNK_WIDTH, z // CHUNK_WIDTH


class ChunkedWorld:
    """
    Block store with chunk load state.

    Read side (used by the pathfinder):
        region_valid_at(coord) / solid_at(coord) / block_at(coord)

    Write side (used by loaders and tests):
        load_chunk / unload_chunk / invalidate_chunk / set_block / fill
    """

    def __init__(self, *, height: int = WORLD_HEIGHT) -> None:
        self.height = height
        self._chunks: Dict[ChunkKey, Chunk] = {}

    # ------------------------------------------------------------------
    # Chunk lifecycle
    # ------------------------------------------------------------------

    def load_chunk(self, cx: int, cz: int) -> Chunk:
        """Return the chunk at (cx, cz), creating an empty one if needed."""
        chunk = self._chunks.get((cx, cz))
        if chunk is None:
            chunk = Chunk(x=cx, z=cz)
            self._chunks[(cx, cz)] = chunk
        return chunk

    def unload_chunk(self, cx: int, cz: int) -> None:
        self._chunks.pop((cx, cz), None)

    def invalidate_chunk(self, cx: int, cz: int) -> None:
        """Keep the chunk's data but report it as not usable."""
        chunk = self._chunks.get((cx, cz))
        if chunk is not None:
            chunk.valid = False

    def loaded_chunks(self) -> Iterable[ChunkKey]:
        return list(self._chunks)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def region_valid_at(self, coord: Coord) -> bool:
        x, y, z = coord
        if not 0 <= y < self.height:
            return False
        chunk = self._chunks.get(chunk_key(x, z))
        return chunk is not None and chunk.valid

    def block_at(self, coord: Coord) -> Optional[str]:
        x, y, z = coord
        chunk = self._chunks.get(chunk_key(x, z))
        if chunk is None:
            return None
        return chunk.get(self._local(coord))

    def solid_at(self, coord: Coord) -> bool:
        return is_solid_block(self.block_at(coord))

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def set_block(self, coord: Coord, block: Any) -> None:
        """Place `block` at `coord`, loading the owning chunk if needed."""
        x, y, z = coord
        if not 0 <= y < self.height:
            raise ValueError(f"y={y} outside world height 0..{self.height - 1}")
        chunk = self.load_chunk(*chunk_key(x, z))
        chunk.set(self._local(coord), normalize_block_id(block))

    def fill(self, corner_a: Coord, corner_b: Coord, block: Any) -> int:
        """Fill the inclusive box between two corners. Returns blocks written."""
        (x0, x1), (y0, y1), (z0, z1) = (
            sorted((corner_a[i], corner_b[i])) for i in range(3)
        )
        count = 0
        for x in range(x0, x1 + 1):
            for z in range(z0, z1 + 1):
                for y in range(y0, y1 + 1):
                    self.set_block((x, y, z), block)
                    count += 1
        return count

    @staticmethod
    def _local(coord: Coord) -> Coord:
        x, y, z = coord
        return x % CHUNK_WIDTH, y, z % CHUNK_WIDTH

    # ------------------------------------------------------------------
    # Layout loading
    # ------------------------------------------------------------------

    @classmethod
    def from_layout(cls, layout: Mapping[str, Any]) -> "ChunkedWorld":
        """
        Build a world from a plain mapping:

            height: 256                    # optional
            chunks: [[0, 0], [-1, 0]]      # optional, loaded empty
            fill:
              - {from: [-8, 0, -8], to: [8, 0, 8], block: stone}
            blocks:
              - {at: [2, 1, 0], block: fence}
            unloaded_chunks: [[1, 0]]      # dropped after everything else
        """
        world = cls(height=int(layout.get("height", WORLD_HEIGHT)))

        for key in layout.get("chunks") or []:
            world.load_chunk(*_pair(key, "chunks"))

        for entry in layout.get("fill") or []:
            world.fill(
                _triple(entry.get("from"), "fill.from"),
                _triple(entry.get("to"), "fill.to"),
                entry.get("block"),
            )

        for entry in layout.get("blocks") or []:
            world.set_block(_triple(entry.get("at"), "blocks.at"), entry.get("block"))

        for key in layout.get("unloaded_chunks") or []:
            world.unload_chunk(*_pair(key, "unloaded_chunks"))

        log.debug("built world with %d chunks", len(world._chunks))
        return world

    @classmethod
    def load_layout(cls, path: Path) -> "ChunkedWorld":
        """Read a YAML layout file (see from_layout)."""
        if not path.exists():
            raise FileNotFoundError(f"Missing world layout: {path}")
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
        return cls.from_layout(data)


def _triple(value: Optional[Sequence[Any]], where: str) -> Coord:
    if value is None or len(value) != 3:
        raise ValueError(f"{where}: expected [x, y, z], got {value!r}")
    return int(value[0]), int(value[1]), int(value[2])


def _pair(value: Sequence[Any], where: str) -> ChunkKey:
    if len(value) != 2:
        raise ValueError(f"{where}: expected [chunk_x, chunk_z], got {value!r}")
    return int(value[0]), int(value[1])


__all__ = ["CHUNK_WIDTH", "WORLD_HEIGHT", "Chunk", "ChunkedWorld", "chunk_key"]
