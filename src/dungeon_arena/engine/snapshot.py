"""Read-only text projections of a game state for planners."""

from .tiles import PLAYER_GLYPH, TILE_GLYPHS
from .types import GameState


def game_state_to_ascii(state: GameState) -> str:
    """Render the grid one glyph per cell, '@' marking the player."""
    lines = []
    for y, row in enumerate(state.grid):
        line = []
        for x, tile in enumerate(row):
            if state.player_position.x == x and state.player_position.y == y:
                line.append(PLAYER_GLYPH)
            else:
                line.append(TILE_GLYPHS.get(tile.type, "?"))
        lines.append("".join(line))
    return "\n".join(lines)


def state_summary(state: GameState) -> str:
    pos = state.player_position
    keys = ",".join(color.value.lower() for color in state.inventory.keys) or "none"
    if state.done:
        status = "solved" if state.success else "failed"
    else:
        status = "active"
    return f"turn={state.turn}/{state.max_turns} pos=({pos.x},{pos.y}) keys={keys} status={status}"
