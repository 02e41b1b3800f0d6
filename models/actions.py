"""Action request and response models for Black Echo."""

from enum import Enum

from pydantic import BaseModel


class ActionType(str, Enum):
    """Operations that can change a session."""
    INITIALIZE = "initialize"
    START = "start"
    RESTART = "restart"
    ROLL = "roll"
    MOVE = "move"
    PASS = "pass"
    ECHO = "echo"
    ECHO_EXPIRED = "echo_expired"   # Timed echo ran out
    ENEMY_TURN = "enemy_turn"       # Automatic, never requested by the player


class MoveRequest(BaseModel):
    """A requested player destination."""
    row: int
    col: int


class ActionResult(BaseModel):
    """The engine's response after processing an operation."""
    success: bool
    action_type: ActionType
    description: str                # Human-readable narrative
    dice_result: int | None = None
    error: str | None = None        # Why the operation was ignored
