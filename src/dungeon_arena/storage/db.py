"""Database connection and core operations for the level library."""

import logging
import sqlite3
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..engine.types import ActionResult, Level
from .schema import create_tables, deserialize_level, serialize_level, serialize_step


logger = logging.getLogger(__name__)


class Database:
    """SQLite wrapper for saved levels and attempt logs."""

    def __init__(self, db_path: str = "dungeon_arena.db"):
        """Initialize database connection and create tables."""
        self.db_path = Path(db_path)
        create_tables(str(self.db_path))

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(str(self.db_path))

    def save_level(self, level: Level) -> None:
        """Insert a level, replacing any saved level with the same ID."""
        with self._get_conn() as conn:
            conn.execute("""
                INSERT INTO levels (level_id, name, updated_at, level_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(level_id) DO UPDATE SET
                    name = excluded.name,
                    updated_at = excluded.updated_at,
                    level_json = excluded.level_json
            """, (
                level.id,
                level.name,
                time.time(),
                serialize_level(level),
            ))
            conn.commit()
        logger.info("Saved level %s (%s)", level.id, level.name)

    def load_level(self, level_id: str) -> Optional[Level]:
        """Load a saved level by ID."""
        with self._get_conn() as conn:
            row = conn.execute("""
                SELECT level_json FROM levels WHERE level_id = ?
            """, (level_id,)).fetchone()

        if row:
            return deserialize_level(row[0])
        return None

    def delete_level(self, level_id: str) -> bool:
        """Delete a saved level; returns whether anything was removed."""
        with self._get_conn() as conn:
            cursor = conn.execute("DELETE FROM levels WHERE level_id = ?", (level_id,))
            conn.commit()
        if cursor.rowcount:
            logger.info("Deleted level %s", level_id)
        return cursor.rowcount > 0

    def list_levels(self) -> List[Level]:
        """All saved levels, oldest first."""
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT level_json FROM levels ORDER BY updated_at, level_id
            """).fetchall()
        return [deserialize_level(row[0]) for row in rows]

    def level_exists(self, name: str) -> bool:
        """Check whether a level with the given name is saved."""
        with self._get_conn() as conn:
            row = conn.execute("SELECT 1 FROM levels WHERE name = ? LIMIT 1", (name,)).fetchone()
        return row is not None

    def create_attempt(self, level: Level, door_mode: str, source: str) -> str:
        """Create a new attempt record and return its ID."""
        attempt_id = str(uuid.uuid4())
        with self._get_conn() as conn:
            conn.execute("""
                INSERT INTO attempts (attempt_id, level_id, door_mode, source, created_at, level_json)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                attempt_id,
                level.id,
                door_mode,
                source,
                time.time(),
                serialize_level(level),
            ))
            conn.commit()
        logger.info("Started attempt %s on level %s", attempt_id, level.id)
        return attempt_id

    def log_step(self, attempt_id: str, step_idx: int, action: str, result: ActionResult) -> None:
        """Log one executed action."""
        step = serialize_step(result)
        with self._get_conn() as conn:
            conn.execute("""
                INSERT INTO steps (attempt_id, step_idx, turn, action, success, message, done, solved)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                attempt_id,
                step_idx,
                step["turn"],
                action,
                step["success"],
                step["message"],
                step["done"],
                step["solved"],
            ))
            conn.commit()

    def get_attempt_info(self, attempt_id: str) -> Optional[Dict[str, Any]]:
        """Get basic attempt information."""
        with self._get_conn() as conn:
            row = conn.execute("""
                SELECT level_id, door_mode, source, created_at, level_json
                FROM attempts
                WHERE attempt_id = ?
            """, (attempt_id,)).fetchone()

            if row:
                return {
                    "attempt_id": attempt_id,
                    "level_id": row[0],
                    "door_mode": row[1],
                    "source": row[2],
                    "created_at": row[3],
                    "level": deserialize_level(row[4]),
                }
        return None

    def get_steps(self, attempt_id: str) -> List[Dict[str, Any]]:
        """Get all logged steps for an attempt in order."""
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT step_idx, turn, action, success, message, done, solved
                FROM steps
                WHERE attempt_id = ?
                ORDER BY step_idx
            """, (attempt_id,)).fetchall()

            return [{
                "step_idx": row[0],
                "turn": row[1],
                "action": row[2],
                "success": bool(row[3]),
                "message": row[4],
                "done": bool(row[5]),
                "solved": bool(row[6]),
            } for row in rows]

    def list_attempts(self, limit: int = 10) -> List[Dict[str, Any]]:
        """List recent attempts."""
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT attempt_id, level_id, door_mode, source, created_at
                FROM attempts
                ORDER BY created_at DESC
                LIMIT ?
            """, (limit,)).fetchall()

            return [{
                "attempt_id": row[0],
                "level_id": row[1],
                "door_mode": row[2],
                "source": row[3],
                "created_at": row[4],
            } for row in rows]
