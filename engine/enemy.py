"""Server-controlled enemy AI: greedy pursuit of the player."""

from __future__ import annotations

from engine.grid import manhattan, shortest_path
from models.game_state import Grid, Position

# Manhattan distance at which the enemy notices the player
DETECTION_RANGE = 1


def next_step(enemy: Position, target: Position, grid: Grid) -> Position:
    """Decide where the enemy moves on its turn.

    The enemy follows a shortest path toward its target but only ever
    advances one tile per turn. With no path it stays put.
    """
    path = shortest_path(enemy, target, grid)
    if len(path) >= 2:
        return path[1]
    return enemy


def detects(enemy: Position, target: Position) -> bool:
    """Check whether the enemy is close enough to sense its target."""
    return manhattan(enemy, target) == DETECTION_RANGE
