"""Core data types for the dungeon puzzle engine."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(BaseModel):
    """A cell on the grid; x is the column, y is the row."""
    x: int
    y: int


class GridSize(BaseModel):
    width: int = Field(ge=1)
    height: int = Field(ge=1)


class KeyColor(str, Enum):
    """Colors shared by keys and doors."""
    RED = "RED"
    BLUE = "BLUE"
    GREEN = "GREEN"
    YELLOW = "YELLOW"


class TileType(str, Enum):
    """Canonical tile kinds."""
    EMPTY = "EMPTY"
    WALL = "WALL"
    GOAL = "GOAL"
    KEY_RED = "KEY_RED"
    KEY_BLUE = "KEY_BLUE"
    KEY_GREEN = "KEY_GREEN"
    KEY_YELLOW = "KEY_YELLOW"
    DOOR_RED = "DOOR_RED"
    DOOR_BLUE = "DOOR_BLUE"
    DOOR_GREEN = "DOOR_GREEN"
    DOOR_YELLOW = "DOOR_YELLOW"
    BLOCK = "BLOCK"  # pushable box
    TRAP = "TRAP"
    PORTAL_A = "PORTAL_A"
    PORTAL_B = "PORTAL_B"


class Action(str, Enum):
    """Actions a planner can issue."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    INTERACT = "INTERACT"


MOVE_ACTIONS = (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT)


class ActionSource(str, Enum):
    """Who issued an action."""
    HUMAN = "human"
    AI = "ai"


class DoorOpenMode(str, Enum):
    """How closed doors get opened."""
    INTERACT = "interact"  # explicit INTERACT next to the door
    AUTO = "auto"  # walking into the door with its key


class Tile(CamelModel):
    """A single grid cell with optional door/block metadata."""
    type: TileType
    is_open: Optional[bool] = None  # doors only
    is_fixed: Optional[bool] = None  # blocks that neutralized a trap; walkable


class Inventory(BaseModel):
    """Key colors currently held, in pickup order."""
    keys: List[KeyColor] = Field(default_factory=list)


class PushedBlock(BaseModel):
    from_: Position = Field(alias="from")
    to: Position

    model_config = ConfigDict(populate_by_name=True)


class Level(CamelModel):
    """Immutable level blueprint.

    ``layout`` holds raw tile values exactly as authored; they are
    normalized once, when a game is created from the level.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    description: str = ""
    grid_size: GridSize
    max_turns: int = 200
    objective: str = "Reach the goal"
    player_start: Position
    layout: List[List[Any]]

    @model_validator(mode="after")
    def check_player_start(self) -> "Level":
        start = self.player_start
        size = self.grid_size
        if not (0 <= start.x < size.width and 0 <= start.y < size.height):
            raise ValueError(
                f"playerStart ({start.x}, {start.y}) is outside the "
                f"{size.width}x{size.height} grid"
            )
        return self


class MoveRecord(CamelModel):
    """Pre-action snapshot appended to history after a successful action.

    Records are shared between successive states and never modified.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    action: Action
    previous_player_pos: Position
    previous_grid: List[List[Tile]]
    previous_inventory: Inventory
    collected_key: Optional[KeyColor] = None
    opened_door: Optional[Position] = None
    pushed_block: Optional[PushedBlock] = None
    neutralized_trap: Optional[Position] = None
    teleported: bool = False
    source: ActionSource = ActionSource.HUMAN
    timestamp: float


class GameState(CamelModel):
    """Complete state of one simulation."""
    level: Level
    door_mode: DoorOpenMode = DoorOpenMode.INTERACT
    turn: int = 0
    max_turns: int
    grid_size: GridSize
    grid: List[List[Tile]]
    player_position: Position
    inventory: Inventory = Field(default_factory=Inventory)
    objective: str
    done: bool = False
    success: bool = False
    message: Optional[str] = None
    move_history: List[MoveRecord] = Field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def turns_remaining(self) -> int:
        return max(0, self.max_turns - self.turn)

    def tile_at(self, pos: Position) -> Tile:
        return self.grid[pos.y][pos.x]

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.grid_size.width and 0 <= pos.y < self.grid_size.height


class ActionResult(CamelModel):
    """Result of executing one action."""
    success: bool
    new_state: GameState
    message: str


class LegalActionSummary(BaseModel):
    """Summary of a legal action for planners."""
    type: Action
    description: str
    no_op: bool = False
