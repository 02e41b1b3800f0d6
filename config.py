"""Engine-wide configuration constants for Black Echo."""

import os

from pydantic import BaseModel, Field

from models.game_state import EchoMode

MAZE_WIDTH = 21              # Columns, coerced to odd; at least 5
MAZE_HEIGHT = 21             # Rows, coerced to odd; at least 5
LOOP_PASSES = 3              # Loop augmentation passes over the maze
LOOP_CHANCE = 0.12           # Per-wall chance of opening a loop each pass
EXIT_MIN_DISTANCE = 10       # Manhattan distance exit <-> player at spawn
ENEMY_MIN_DISTANCE = 8       # Manhattan distance enemy <-> player at spawn
ENEMY_EXIT_MIN_DISTANCE = 4  # Manhattan distance enemy <-> exit at spawn
DIE_SIDES = 4                # Dice results are uniform in 1..DIE_SIDES
MAX_ECHO_CHARGE = 6          # Charge needed to activate the echo
ECHO_MODE = EchoMode(os.environ.get("ECHO_MODE", EchoMode.UNTIL_MOVE.value))
ECHO_DURATION_SECONDS = float(os.environ.get("ECHO_DURATION_SECONDS", "3.0"))
ENEMY_TURN_DELAY_SECONDS = float(os.environ.get("ENEMY_TURN_DELAY_SECONDS", "0.6"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class GameSettings(BaseModel):
    """Tunable rules for a single game session."""
    maze_width: int = Field(default=MAZE_WIDTH, ge=5)
    maze_height: int = Field(default=MAZE_HEIGHT, ge=5)
    loop_passes: int = Field(default=LOOP_PASSES, ge=0)
    loop_chance: float = Field(default=LOOP_CHANCE, ge=0.0, le=1.0)
    exit_min_distance: int = Field(default=EXIT_MIN_DISTANCE, ge=0)
    enemy_min_distance: int = Field(default=ENEMY_MIN_DISTANCE, ge=0)
    enemy_exit_min_distance: int = Field(default=ENEMY_EXIT_MIN_DISTANCE, ge=0)
    die_sides: int = Field(default=DIE_SIDES, ge=1)
    max_echo_charge: int = Field(default=MAX_ECHO_CHARGE, ge=1)
    echo_mode: EchoMode = ECHO_MODE
    echo_duration_seconds: float = Field(default=ECHO_DURATION_SECONDS, gt=0)
    enemy_turn_delay_seconds: float = Field(default=ENEMY_TURN_DELAY_SECONDS, ge=0)


def get_settings() -> GameSettings:
    """Build settings from the module-level constants."""
    return GameSettings()
