"""Legal action computation for the dungeon puzzle engine."""

from typing import Any, Dict, List, Optional, Tuple

from .types import Action, DoorOpenMode, GameState, LegalActionSummary, MOVE_ACTIONS


# Single-letter dungeon notation used by planners.
NOTATION: Dict[str, Action] = {
    "U": Action.UP,
    "D": Action.DOWN,
    "L": Action.LEFT,
    "R": Action.RIGHT,
    "I": Action.INTERACT,
}


def legal_action_set(door_mode: DoorOpenMode) -> Tuple[Action, ...]:
    """Actions that are structurally valid under a door-open mode."""
    if door_mode == DoorOpenMode.INTERACT:
        return MOVE_ACTIONS + (Action.INTERACT,)
    return MOVE_ACTIONS


def is_action_legal(state: GameState, action: Action) -> bool:
    return action in legal_action_set(state.door_mode)


def coerce_action(raw: Any) -> Optional[Action]:
    """Convert an action-like token into an Action, or None if unrecognized."""
    if isinstance(raw, Action):
        return raw
    if not isinstance(raw, str):
        return None

    token = raw.strip().upper()
    if token in Action.__members__:
        return Action[token]
    return NOTATION.get(token)


def legal_actions(state: GameState) -> List[LegalActionSummary]:
    """List the legal actions for a state with a preview of each outcome.

    Previews run on copies; the given state is not touched.

    Args:
        state: Current game state

    Returns:
        One summary per legal action, empty once the game is over
    """
    from .reducer import execute_action

    if state.done:
        return []

    summaries = []
    for action in legal_action_set(state.door_mode):
        result = execute_action(state, action)
        after = result.new_state
        unchanged = (
            after.player_position == state.player_position
            and after.grid == state.grid
            and after.inventory == state.inventory
        )
        summaries.append(LegalActionSummary(
            type=action,
            description=result.message,
            no_op=unchanged,
        ))
    return summaries
