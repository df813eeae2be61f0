"""
Chunked voxel world storage consumed by the pathfinder.

Exports:
    - ChunkedWorld: block store with chunk load state
    - Chunk: one 16-wide column
    - normalize_block_id / is_solid_block: block classification
"""

from __future__ import annotations

from .blocks import is_solid_block, normalize_block_id
from .chunks import CHUNK_WIDTH, Chunk, ChunkedWorld

__all__ = [
    "CHUNK_WIDTH",
    "Chunk",
    "ChunkedWorld",
    "is_solid_block",
    "normalize_block_id",
]
