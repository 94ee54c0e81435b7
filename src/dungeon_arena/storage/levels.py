"""JSON import/export for level blueprints."""

import json
import logging
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from ..engine.types import Level


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "name", "layout", "playerStart", "gridSize")
DEFAULT_MAX_TURNS = 200
DEFAULT_OBJECTIVE = "Reach the goal"


class LevelFormatError(ValueError):
    """Raised when level data is missing required fields or is malformed."""


def level_to_dict(level: Level) -> Dict[str, Any]:
    """Convert a level to its persisted camelCase form."""
    return level.model_dump(by_alias=True, mode="json")


def level_from_dict(
    data: Any,
    default_max_turns: int = DEFAULT_MAX_TURNS,
    default_objective: str = DEFAULT_OBJECTIVE,
) -> Level:
    """Validate persisted level data, filling documented defaults.

    Unknown fields are ignored.
    """
    if not isinstance(data, dict):
        raise LevelFormatError("Level data must be a JSON object")

    missing = [field for field in REQUIRED_FIELDS if field not in data or data[field] in (None, "")]
    if missing:
        raise LevelFormatError(f"Invalid level format: missing {', '.join(missing)}")

    try:
        return Level.model_validate({
            "id": data["id"],
            "name": data["name"],
            "description": data.get("description") or "",
            "gridSize": data["gridSize"],
            "maxTurns": data.get("maxTurns") or default_max_turns,
            "objective": data.get("objective") or default_objective,
            "playerStart": data["playerStart"],
            "layout": data["layout"],
        })
    except ValidationError as e:
        raise LevelFormatError(f"Invalid level format: {e}") from e


def export_level_json(level: Level) -> str:
    """Export a level to an indented JSON string."""
    return json.dumps(level_to_dict(level), indent=2)


def export_levels_json(levels: Sequence[Level]) -> str:
    """Export several levels as a JSON array."""
    return json.dumps([level_to_dict(level) for level in levels], indent=2)


def import_level_json(text: str, **defaults) -> Level:
    """Import a single level from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to import level: %s", e)
        raise LevelFormatError(f"Invalid JSON: {e}") from e

    try:
        return level_from_dict(data, **defaults)
    except LevelFormatError as e:
        logger.error("Failed to import level: %s", e)
        raise


def import_levels_json(text: str, **defaults) -> List[Level]:
    """Import a JSON array of levels (a single object is also accepted)."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to import levels: %s", e)
        raise LevelFormatError(f"Invalid JSON: {e}") from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise LevelFormatError("Level bundle must be a JSON array")
    return [level_from_dict(item, **defaults) for item in data]
