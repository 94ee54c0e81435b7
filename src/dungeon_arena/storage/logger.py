"""High-level logging and replay interface for puzzle attempts."""

from typing import Any, Dict, List, Optional, Union

from ..engine.reducer import create_game, execute_action
from ..engine.types import Action, ActionResult, ActionSource, DoorOpenMode, GameState, Level
from .db import Database


class AttemptLogger:
    """Handles logging for a single attempt."""

    def __init__(self, db_path: str = "dungeon_arena.db"):
        """Initialize logger with database path."""
        self.db = Database(db_path)
        self.attempt_id: Optional[str] = None
        self._step_idx = 0

    def start_attempt(
        self,
        level: Level,
        door_mode: DoorOpenMode = DoorOpenMode.INTERACT,
        source: ActionSource = ActionSource.HUMAN,
    ) -> str:
        """Start a new attempt and return the attempt ID."""
        self.attempt_id = self.db.create_attempt(level, DoorOpenMode(door_mode).value, ActionSource(source).value)
        self._step_idx = 0
        return self.attempt_id

    def log_step(self, action: Union[Action, str], result: ActionResult) -> None:
        """Log one executed action and its result."""
        if not self.attempt_id:
            raise ValueError("Attempt not started")
        token = action.value if isinstance(action, Action) else str(action)
        self.db.log_step(self.attempt_id, self._step_idx, token, result)
        self._step_idx += 1

    def log_results(self, actions: List[Union[Action, str]], results: List[ActionResult]) -> None:
        """Log a batch; actions beyond the last result never ran and are skipped."""
        for action, result in zip(actions, results):
            self.log_step(action, result)


class AttemptReplay:
    """Handles replaying an attempt from the database."""

    def __init__(self, db_path: str = "dungeon_arena.db"):
        """Initialize replay with database path."""
        self.db = Database(db_path)

    def get_attempt_info(self, attempt_id: str) -> Optional[Dict[str, Any]]:
        """Get basic attempt information."""
        return self.db.get_attempt_info(attempt_id)

    def get_steps(self, attempt_id: str) -> List[Dict[str, Any]]:
        """Get the logged steps of an attempt."""
        return self.db.get_steps(attempt_id)

    def list_recent_attempts(self, limit: int = 10) -> List[Dict[str, Any]]:
        """List recent attempts."""
        return self.db.list_attempts(limit)

    def replay(self, attempt_id: str) -> GameState:
        """Re-run a logged attempt through the engine and return the final state.

        Args:
            attempt_id: ID of the attempt to replay

        Returns:
            The state after the last logged step

        Raises:
            ValueError: If the attempt is unknown or a step no longer reproduces
        """
        info = self.get_attempt_info(attempt_id)
        if not info:
            raise ValueError(f"Attempt {attempt_id} not found")

        state = create_game(info["level"], door_mode=DoorOpenMode(info["door_mode"]))
        source = ActionSource(info["source"])
        for step in self.get_steps(attempt_id):
            result = execute_action(state, step["action"], source)
            if result.message != step["message"] or result.new_state.turn != step["turn"]:
                raise ValueError(
                    f"Attempt {attempt_id} diverged at step {step['step_idx']}: "
                    f"logged {step['message']!r}, replayed {result.message!r}"
                )
            state = result.new_state
        return state
