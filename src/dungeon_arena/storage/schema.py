"""SQLite database schema for the level library and attempt logs."""

import json
import sqlite3
from typing import Any, Dict

from ..engine.types import ActionResult, Level
from .levels import level_from_dict, level_to_dict


# Database schema creation SQL
SCHEMA_SQL = """
-- Levels table: saved level blueprints
CREATE TABLE IF NOT EXISTS levels (
    level_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    updated_at REAL NOT NULL,
    level_json TEXT NOT NULL
);

-- Attempts table: one play-through of a level
CREATE TABLE IF NOT EXISTS attempts (
    attempt_id TEXT PRIMARY KEY,
    level_id TEXT NOT NULL,
    door_mode TEXT NOT NULL,
    source TEXT NOT NULL,
    created_at REAL NOT NULL,
    level_json TEXT NOT NULL
);

-- Steps table: every action submitted during an attempt
CREATE TABLE IF NOT EXISTS steps (
    attempt_id TEXT NOT NULL,
    step_idx INTEGER NOT NULL,
    turn INTEGER NOT NULL,
    action TEXT NOT NULL,
    success INTEGER NOT NULL,
    message TEXT NOT NULL,
    done INTEGER NOT NULL,
    solved INTEGER NOT NULL,
    PRIMARY KEY (attempt_id, step_idx),
    FOREIGN KEY (attempt_id) REFERENCES attempts(attempt_id)
);
"""


def create_tables(db_path: str) -> None:
    """Create all database tables if they don't exist."""
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()


def serialize_level(level: Level) -> str:
    """Convert a Level to JSON for storage."""
    return json.dumps(level_to_dict(level))


def deserialize_level(json_str: str) -> Level:
    """Convert stored JSON back to a Level."""
    return level_from_dict(json.loads(json_str))


def serialize_step(result: ActionResult) -> Dict[str, Any]:
    """Flatten the parts of an ActionResult worth keeping per step."""
    state = result.new_state
    return {
        "turn": state.turn,
        "success": int(result.success),
        "message": result.message,
        "done": int(state.done),
        "solved": int(state.done and state.success),
    }
