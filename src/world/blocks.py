# block id classification for movement
# src/world/blocks.py
"""
Block classification used by the chunked world.

Only one question matters for navigation: does a block stop a mob from
occupying its cell? Partial blocks (slabs, fences, stairs) count as solid.
Block ids are namespaced strings ("minecraft:stone"); a missing block or
None is air.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Optional

AIR = "minecraft:air"

# Everything not listed here is solid.
NON_SOLID_BLOCKS: FrozenSet[str] = frozenset(
    {
        AIR,
        "minecraft:water",
        "minecraft:flowing_water",
        "minecraft:lava",
        "minecraft:flowing_lava",
        "minecraft:tallgrass",
        "minecraft:deadbush",
        "minecraft:yellow_flower",
        "minecraft:red_flower",
        "minecraft:sapling",
        "minecraft:torch",
        "minecraft:redstone_wire",
        "minecraft:snow_layer",
        "minecraft:vine",
        "minecraft:reeds",
        "minecraft:wheat",
        "minecraft:carpet",
        "minecraft:rail",
        "minecraft:lever",
        "minecraft:stone_button",
        "minecraft:wooden_button",
        "minecraft:ladder",
        "minecraft:web",
    }
)


def normalize_block_id(block: Any) -> Optional[str]:
    """
    Turn a block value into a lowercase namespaced id, or None for air.

    Accepts:
      - None / "" / "air" / "minecraft:air"  -> None
      - "stone"                              -> "minecraft:stone"
      - {"id": "minecraft:stone"} / {"name": ...}
    """
    if block is None:
        return None
    if isinstance(block, dict):
        block = block.get("id") or block.get("name")
        if block is None:
            return None
    if not isinstance(block, str):
        raise TypeError(f"unsupported block value: {block!r}")

    block_id = block.strip().lower()
    if not block_id:
        return None
    if ":" not in block_id:
        block_id = f"minecraft:{block_id}"
    if block_id == AIR:
        return None
    return block_id


def is_solid_block(block_id: Optional[str]) -> bool:
    if block_id is None:
        return False
    return block_id not in NON_SOLID_BLOCKS


__all__ = ["AIR", "NON_SOLID_BLOCKS", "normalize_block_id", "is_solid_block"]
