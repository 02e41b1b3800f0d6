"""Game state, grid, and event models for Black Echo."""

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel


class Position(NamedTuple):
    """A grid coordinate. Compared and hashed by value."""
    row: int
    col: int


class CellType(str, Enum):
    """What occupies a grid cell."""
    WALL = "wall"
    PATH = "path"


class GameTurn(str, Enum):
    """Whose move it is."""
    PLAYER = "player"
    ENEMY = "enemy"


class TurnPhase(str, Enum):
    """Sub-state within a turn."""
    ROLLING = "rolling"             # Waiting for the dice
    MOVING = "moving"               # Dice rolled, waiting for a destination


class GameStatus(str, Enum):
    """Overall session state."""
    LORE = "lore"                   # Intro shown, game not started
    PLAYING = "playing"
    WIN = "win"
    LOSE = "lose"


class ResultReason(str, Enum):
    """Why a session ended."""
    ESCAPED = "escaped"             # Player reached the exit
    CAUGHT = "caught"               # Player and enemy share a cell
    DETECTED = "detected"           # Enemy ended its turn next to the player


class EchoMode(str, Enum):
    """How long an activated echo lasts."""
    UNTIL_MOVE = "until_move"       # Until the next player move or turn end
    TIMED = "timed"                 # Fixed real-time window


Grid = list[list[CellType]]


class GameEvent(BaseModel):
    """A logged event from the game."""
    turn_number: int
    action_type: str
    description: str
    details: dict = {}
    timestamp: datetime


class GameState(BaseModel):
    """The full state of a game session."""
    grid: Grid                      # 2D grid [row][col]
    player: Position
    enemy: Position
    exit: Position
    status: GameStatus = GameStatus.LORE
    turn: GameTurn = GameTurn.PLAYER
    phase: TurnPhase = TurnPhase.ROLLING
    dice_result: int = 0            # 0 until rolled this turn
    possible_moves: set[Position] = set()
    echo_charge: int = 0
    echo_active: bool = False
    echo_used_this_turn: bool = False
    turn_number: int = 1            # Completed player turns + 1
    result_reason: ResultReason | None = None
    result_message: str | None = None
    event_log: list[GameEvent] = []

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.WIN, GameStatus.LOSE)
