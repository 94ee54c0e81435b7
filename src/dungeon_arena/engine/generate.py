"""Level construction helpers for the dungeon puzzle engine."""

import time
from typing import List, Optional, Sequence

from .tiles import GLYPH_TILES, PLAYER_GLYPH
from .types import GridSize, Level, Position, TileType


def create_blank_level(width: int, height: int, name: str = "Untitled Level") -> Level:
    """Create an empty level enclosed by walls.

    Args:
        width: Number of columns
        height: Number of rows
        name: Display name

    Returns:
        Level with a wall border, an empty interior and the player at (1, 1)
    """
    layout = [
        [
            TileType.WALL.value if x in (0, width - 1) or y in (0, height - 1) else TileType.EMPTY.value
            for x in range(width)
        ]
        for y in range(height)
    ]

    return Level(
        id=f"custom_{int(time.time() * 1000)}",
        name=name,
        description="A custom puzzle",
        grid_size=GridSize(width=width, height=height),
        max_turns=200,
        objective="Reach the goal",
        player_start=Position(x=min(1, width - 1), y=min(1, height - 1)),
        layout=layout,
    )


def create_demo_level() -> Level:
    """Fixed 10x8 level exercising walls, a key/door pair, a trap and a block."""
    width, height = 10, 8
    layout = [list(row) for row in create_blank_level(width, height).layout]

    layout[3][3] = TileType.WALL.value
    layout[3][4] = TileType.WALL.value
    layout[4][3] = TileType.WALL.value

    layout[2][7] = TileType.KEY_RED.value
    layout[5][5] = TileType.DOOR_RED.value

    layout[6][3] = TileType.TRAP.value
    layout[4][6] = TileType.BLOCK.value
    layout[6][7] = TileType.GOAL.value

    return Level(
        id="demo_level",
        name="Demo Level",
        description="A simple demo to test game mechanics",
        grid_size=GridSize(width=width, height=height),
        max_turns=50,
        objective="Collect the key, unlock the door, and reach the goal!",
        player_start=Position(x=1, y=1),
        layout=layout,
    )


def level_from_ascii(
    rows: Sequence[str],
    level_id: str = "ascii_level",
    name: str = "ASCII Level",
    max_turns: int = 200,
    objective: str = "Reach the goal",
    player_start: Optional[Position] = None,
) -> Level:
    """Build a level from snapshot glyph rows.

    '@' marks the player start and is stored as EMPTY. Unknown glyphs
    become EMPTY and short rows are padded to the widest row.
    """
    width = max((len(row) for row in rows), default=0)
    layout: List[List[str]] = []
    start = player_start

    for y, row in enumerate(rows):
        cells = []
        for x in range(width):
            glyph = row[x] if x < len(row) else "."
            if glyph == PLAYER_GLYPH:
                if start is None:
                    start = Position(x=x, y=y)
                cells.append(TileType.EMPTY.value)
            else:
                cells.append(GLYPH_TILES.get(glyph, TileType.EMPTY).value)
        layout.append(cells)

    if start is None:
        raise ValueError("level rows contain no player start ('@')")

    return Level(
        id=level_id,
        name=name,
        grid_size=GridSize(width=width, height=len(rows)),
        max_turns=max_turns,
        objective=objective,
        player_start=start,
        layout=layout,
    )
