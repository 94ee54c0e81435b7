"""Action execution logic for the dungeon puzzle engine."""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .rules import coerce_action, is_action_legal
from .tiles import (
    is_closed_door,
    is_key,
    is_passable,
    is_pushable_block,
    key_color,
    normalize_tile,
)
from .types import (
    Action,
    ActionResult,
    ActionSource,
    DoorOpenMode,
    GameState,
    Inventory,
    KeyColor,
    Level,
    MoveRecord,
    Position,
    PushedBlock,
    Tile,
    TileType,
)


logger = logging.getLogger(__name__)

MIN_TURN_BUDGET = 200

DIRECTION_DELTAS = {
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
}

# Neighbor scan order for INTERACT: up, down, left, right.
INTERACT_ORDER = (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT)

FINISHED_MESSAGE = "Game is already finished"
GOAL_MESSAGE = "You reached the goal! Puzzle complete!"
TRAP_MESSAGE = "You stepped on a trap! Game over."


@dataclass
class StepOutcome:
    """What a single move/interact/push did to the working state."""
    success: bool
    message: str
    collected_key: Optional[KeyColor] = None
    opened_door: Optional[Position] = None
    pushed_block: Optional[PushedBlock] = None
    neutralized_trap: Optional[Position] = None
    teleported: bool = False


def _copy_grid(grid: List[List[Tile]]) -> List[List[Tile]]:
    return [[tile.model_copy() for tile in row] for row in grid]


def _working_copy(state: GameState) -> GameState:
    """Copy the mutable parts of a state; recorded moves are shared, not copied."""
    return state.model_copy(update={
        "grid": _copy_grid(state.grid),
        "player_position": state.player_position.model_copy(),
        "inventory": state.inventory.model_copy(deep=True),
        "move_history": list(state.move_history),
    })


def create_game(
    level: Level,
    door_mode: DoorOpenMode = DoorOpenMode.INTERACT,
    min_turn_budget: int = MIN_TURN_BUDGET,
) -> GameState:
    """Create a fresh game state from a level blueprint.

    Every raw layout value is normalized here, once. Missing rows or
    cells read as EMPTY and cells beyond the declared grid size are
    ignored, so no layout content can make this raise.
    """
    width = level.grid_size.width
    height = level.grid_size.height

    grid = []
    for y in range(height):
        raw_row = level.layout[y] if y < len(level.layout) else []
        row = []
        for x in range(width):
            tile = normalize_tile(raw_row[x] if x < len(raw_row) else None)
            if is_closed_door(tile):
                tile.is_open = False
            row.append(tile)
        grid.append(row)

    return GameState(
        level=level,
        door_mode=door_mode,
        turn=0,
        max_turns=max(level.max_turns, min_turn_budget),
        grid_size=level.grid_size.model_copy(),
        grid=grid,
        player_position=level.player_start.model_copy(),
        inventory=Inventory(),
        objective=level.objective,
        done=False,
        success=False,
        move_history=[],
        start_time=None,
        end_time=None,
    )


def execute_action(
    state: GameState,
    action: Union[Action, str],
    source: Union[ActionSource, str] = ActionSource.HUMAN,
) -> ActionResult:
    """Apply one action and return the resulting state.

    Args:
        state: Current game state; never mutated
        action: An Action or a loose token such as "up" or "R"
        source: Who issued the action

    Returns:
        ActionResult whose state owns its grid, position and inventory
    """
    if state.done:
        logger.debug("Rejected %s on finished game", action)
        return ActionResult(success=False, new_state=state, message=FINISHED_MESSAGE)

    next_state = _working_copy(state)
    next_state.turn = state.turn + 1
    if next_state.start_time is None:
        next_state.start_time = time.time()

    previous_pos = state.player_position.model_copy()
    previous_grid = _copy_grid(state.grid)
    previous_inventory = state.inventory.model_copy(deep=True)

    resolved = coerce_action(action)
    if resolved is None or not is_action_legal(next_state, resolved):
        label = resolved.value if resolved is not None else action
        outcome = StepOutcome(success=False, message=f"invalid action: {label}")
        logger.debug("Invalid action %r at turn %d", action, next_state.turn)
    elif resolved == Action.INTERACT:
        outcome = try_interact(next_state)
    else:
        outcome = try_move(next_state, resolved)

    message = outcome.message
    current_tile = next_state.tile_at(next_state.player_position)
    if current_tile.type == TileType.GOAL:
        next_state.done = True
        next_state.success = True
        next_state.end_time = time.time()
        message = GOAL_MESSAGE
    elif current_tile.type == TileType.TRAP:
        next_state.done = True
        next_state.success = False
        next_state.end_time = time.time()
        message = TRAP_MESSAGE

    next_state.message = message

    if outcome.success:
        next_state.move_history.append(MoveRecord(
            id=str(uuid.uuid4()),
            action=resolved,
            previous_player_pos=previous_pos,
            previous_grid=previous_grid,
            previous_inventory=previous_inventory,
            collected_key=outcome.collected_key,
            opened_door=outcome.opened_door,
            pushed_block=outcome.pushed_block,
            neutralized_trap=outcome.neutralized_trap,
            teleported=outcome.teleported,
            source=ActionSource(source),
            timestamp=time.time(),
        ))

    logger.debug("Turn %d: %s -> %s", next_state.turn, action, message)
    return ActionResult(success=outcome.success, new_state=next_state, message=message)


def execute_actions(
    state: GameState,
    actions: Iterable[Union[Action, str]],
    source: Union[ActionSource, str] = ActionSource.HUMAN,
) -> List[ActionResult]:
    """Apply a batch of actions in order, stopping once the game ends."""
    results = []
    for action in actions:
        result = execute_action(state, action, source)
        results.append(result)
        state = result.new_state
        if state.done:
            break
    return results


def undo_move(state: GameState) -> GameState:
    """Restore the snapshot taken before the last recorded action."""
    if not state.move_history:
        return state

    last_move = state.move_history[-1]
    previous = state.model_copy(update={"move_history": state.move_history[:-1]})
    previous.player_position = last_move.previous_player_pos.model_copy()
    previous.grid = _copy_grid(last_move.previous_grid)
    previous.inventory = last_move.previous_inventory.model_copy(deep=True)
    previous.turn = state.turn - 1
    previous.done = False
    previous.success = False
    previous.message = None
    previous.end_time = None
    return previous


def reset_game(state: GameState, min_turn_budget: int = MIN_TURN_BUDGET) -> GameState:
    """Start over from the same level, keeping the door mode."""
    return create_game(state.level, door_mode=state.door_mode, min_turn_budget=min_turn_budget)


def try_move(state: GameState, action: Action) -> StepOutcome:
    """Move the player one cell, pushing a block or opening a door if needed.

    Bumping into anything is a turn-consuming no-op, still reported as success.
    """
    dx, dy = DIRECTION_DELTAS[action]
    dir_name = action.value.lower()
    pos = state.player_position
    dest = Position(x=pos.x + dx, y=pos.y + dy)

    if not state.in_bounds(dest):
        return StepOutcome(success=True, message=f"moved {dir_name} (no-op: out of bounds)")

    target = state.tile_at(dest)
    pushed_block = None
    neutralized_trap = None
    opened_door = None

    if is_pushable_block(target):
        push = try_push_block(state, dest, (dx, dy))
        if not push.success:
            return StepOutcome(success=True, message=f"moved {dir_name} (no-op: {push.message})")
        pushed_block = push.pushed_block
        neutralized_trap = push.neutralized_trap

    if state.door_mode == DoorOpenMode.AUTO and is_closed_door(target):
        color = key_color(target.type)
        if color not in state.inventory.keys:
            return StepOutcome(
                success=True,
                message=f"moved {dir_name} (no-op: need {color.value.lower()} key)",
            )
        state.grid[dest.y][dest.x] = Tile(type=TileType.EMPTY)
        opened_door = dest.model_copy()

    landed = state.tile_at(dest)
    if not is_passable(landed):
        return StepOutcome(success=True, message=f"moved {dir_name} (no-op: blocked)")

    state.player_position = dest

    collected_key = None
    if is_key(landed.type):
        color = key_color(landed.type)
        if color not in state.inventory.keys:
            state.inventory.keys.append(color)
            state.grid[dest.y][dest.x] = Tile(type=TileType.EMPTY)
            collected_key = color

    teleported = False
    if landed.type in (TileType.PORTAL_A, TileType.PORTAL_B):
        partner = find_other_portal(state, landed.type)
        if partner is not None:
            state.player_position = partner
            teleported = True

    message = f"moved {dir_name}"
    if opened_door is not None:
        message = f"opened {key_color(target.type).value.lower()} door"
    if collected_key is not None:
        message = f"collected {collected_key.value.lower()} key"
    if teleported:
        message = "teleported through portal"

    return StepOutcome(
        success=True,
        message=message,
        collected_key=collected_key,
        opened_door=opened_door,
        pushed_block=pushed_block,
        neutralized_trap=neutralized_trap,
        teleported=teleported,
    )


def try_push_block(state: GameState, block_pos: Position, delta: Tuple[int, int]) -> StepOutcome:
    """Push the block at block_pos one cell along delta.

    A block pushed onto a trap destroys both; only one block moves per push.
    """
    dest = Position(x=block_pos.x + delta[0], y=block_pos.y + delta[1])
    if not state.in_bounds(dest):
        return StepOutcome(success=False, message="cannot push block there")

    target = state.tile_at(dest)
    if target.type not in (TileType.EMPTY, TileType.TRAP):
        return StepOutcome(success=False, message="cannot push block there")

    pushed_block = None
    neutralized_trap = None
    if target.type == TileType.TRAP:
        state.grid[dest.y][dest.x] = Tile(type=TileType.EMPTY)
        neutralized_trap = dest
    else:
        state.grid[dest.y][dest.x] = Tile(type=TileType.BLOCK)
        pushed_block = PushedBlock(from_=block_pos.model_copy(), to=dest)

    state.grid[block_pos.y][block_pos.x] = Tile(type=TileType.EMPTY)
    return StepOutcome(
        success=True,
        message="pushed block",
        pushed_block=pushed_block,
        neutralized_trap=neutralized_trap,
    )


def try_interact(state: GameState) -> StepOutcome:
    """Open the first closed door next to the player, if its key is held."""
    pos = state.player_position
    for direction in INTERACT_ORDER:
        dx, dy = DIRECTION_DELTAS[direction]
        adjacent = Position(x=pos.x + dx, y=pos.y + dy)
        if not state.in_bounds(adjacent):
            continue

        tile = state.tile_at(adjacent)
        if not is_closed_door(tile):
            continue

        color = key_color(tile.type)
        if color in state.inventory.keys:
            state.grid[adjacent.y][adjacent.x] = Tile(type=TileType.EMPTY)
            return StepOutcome(
                success=True,
                message=f"opened {color.value.lower()} door",
                opened_door=adjacent,
            )
        return StepOutcome(success=True, message=f"interact (no-op: need {color.value.lower()} key)")

    return StepOutcome(success=True, message="interact (no-op: nothing to interact with)")


def find_other_portal(state: GameState, portal_type: TileType) -> Optional[Position]:
    """Row-major search for the partner of a portal tile."""
    target = TileType.PORTAL_B if portal_type == TileType.PORTAL_A else TileType.PORTAL_A
    for y, row in enumerate(state.grid):
        for x, tile in enumerate(row):
            if tile.type == target:
                return Position(x=x, y=y)
    return None
