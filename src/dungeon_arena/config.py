"""Configuration management for Dungeon Arena."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from dungeon_arena.engine.types import DoorOpenMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DUNGEON_", case_sensitive=False)

    # Rules
    door_open_mode: DoorOpenMode = DoorOpenMode.INTERACT
    min_turn_budget: int = 200

    # Level import defaults
    default_max_turns: int = 200
    default_objective: str = "Reach the goal"

    # Storage
    db_path: str = "dungeon_arena.db"

    # Logging
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
