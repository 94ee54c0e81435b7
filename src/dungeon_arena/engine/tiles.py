"""Tile normalization and per-tile rules."""

import re
from typing import Any, Dict, Optional

from .types import KeyColor, Tile, TileType


_DELIMITERS = re.compile(r"[\s\-]+")

# Every spelling normalize_tile accepts, after upper-casing and joining words
# with underscores. Anything else is EMPTY.
_TILE_NAMES: Dict[str, TileType] = {
    "EMPTY": TileType.EMPTY,
    "E": TileType.EMPTY,
    ".": TileType.EMPTY,
    "P": TileType.EMPTY,  # player start marker
    "WALL": TileType.WALL,
    "W": TileType.WALL,
    "#": TileType.WALL,
    "GOAL": TileType.GOAL,
    "G": TileType.GOAL,
    "KEY_RED": TileType.KEY_RED,
    "KEYRED": TileType.KEY_RED,
    "KEY_BLUE": TileType.KEY_BLUE,
    "KEYBLUE": TileType.KEY_BLUE,
    "KEY_GREEN": TileType.KEY_GREEN,
    "KEYGREEN": TileType.KEY_GREEN,
    "KEY_YELLOW": TileType.KEY_YELLOW,
    "KEYYELLOW": TileType.KEY_YELLOW,
    "DOOR_RED": TileType.DOOR_RED,
    "DOORRED": TileType.DOOR_RED,
    "DOOR_BLUE": TileType.DOOR_BLUE,
    "DOORBLUE": TileType.DOOR_BLUE,
    "DOOR_GREEN": TileType.DOOR_GREEN,
    "DOORGREEN": TileType.DOOR_GREEN,
    "DOOR_YELLOW": TileType.DOOR_YELLOW,
    "DOORYELLOW": TileType.DOOR_YELLOW,
    "BLOCK": TileType.BLOCK,
    "X": TileType.BLOCK,
    "BOX": TileType.BLOCK,
    "CRATE": TileType.BLOCK,
    "TRAP": TileType.TRAP,
    "!": TileType.TRAP,
    "PORTAL_A": TileType.PORTAL_A,
    "PORTALA": TileType.PORTAL_A,
    "PORTAL": TileType.PORTAL_A,
    "PORTAL_B": TileType.PORTAL_B,
    "PORTALB": TileType.PORTAL_B,
}
_FIXED_BLOCK_NAMES = {"F", "FIXED_BLOCK"}

# Glyphs for the planner-facing text snapshot.
TILE_GLYPHS: Dict[TileType, str] = {
    TileType.WALL: "#",
    TileType.EMPTY: ".",
    TileType.GOAL: "G",
    TileType.KEY_RED: "r",
    TileType.KEY_BLUE: "b",
    TileType.KEY_GREEN: "g",
    TileType.KEY_YELLOW: "y",
    TileType.DOOR_RED: "D",
    TileType.DOOR_BLUE: "E",
    TileType.DOOR_GREEN: "F",
    TileType.DOOR_YELLOW: "H",
    TileType.BLOCK: "O",
    TileType.TRAP: "T",
    TileType.PORTAL_A: "A",
    TileType.PORTAL_B: "Z",
}
PLAYER_GLYPH = "@"
GLYPH_TILES: Dict[str, TileType] = {glyph: tile_type for tile_type, glyph in TILE_GLYPHS.items()}


def normalize_tile(raw: Any) -> Tile:
    """Map an arbitrary layout value onto a canonical tile.

    Never raises; anything unrecognized becomes EMPTY.
    """
    if raw is None:
        return Tile(type=TileType.EMPTY)
    if isinstance(raw, TileType):
        return Tile(type=raw)
    if not isinstance(raw, str):
        return Tile(type=TileType.EMPTY)

    trimmed = raw.strip()
    if not trimmed:
        return Tile(type=TileType.EMPTY)

    name = _DELIMITERS.sub("_", trimmed).upper()
    if name in _FIXED_BLOCK_NAMES:
        return Tile(type=TileType.BLOCK, is_fixed=True)
    return Tile(type=_TILE_NAMES.get(name, TileType.EMPTY))


def key_color(tile_type: TileType) -> Optional[KeyColor]:
    """Color of a key or door tile, None for anything else."""
    if is_key(tile_type) or is_door(tile_type):
        return KeyColor(tile_type.value.split("_", 1)[1])
    return None


def is_key(tile_type: TileType) -> bool:
    return tile_type.value.startswith("KEY_")


def is_door(tile_type: TileType) -> bool:
    return tile_type.value.startswith("DOOR_")


def is_closed_door(tile: Tile) -> bool:
    return is_door(tile.type) and not tile.is_open


def is_pushable_block(tile: Tile) -> bool:
    return tile.type == TileType.BLOCK and not tile.is_fixed


def is_passable(tile: Tile) -> bool:
    """Check whether the player may stand on a tile."""
    if tile.type == TileType.WALL:
        return False
    if is_closed_door(tile):
        return False
    if is_pushable_block(tile):
        return False
    return True
