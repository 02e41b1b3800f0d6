"""Maze generation: randomized depth-first carving plus loop augmentation."""

from __future__ import annotations

import logging
import random

from engine.grid import create_grid
from models.game_state import CellType, Grid, Position

logger = logging.getLogger(__name__)


def normalize_dimension(size: int) -> int:
    """Coerce a maze dimension to an odd value of at least 3."""
    size = max(3, size)
    return size + 1 if size % 2 == 0 else size


def _unvisited_cells(current: Position, grid: Grid) -> list[tuple[Position, Position]]:
    """Cells two steps away that are still walled, with the wall between.

    Returns:
        List of (cell, wall) pairs that stay strictly inside the border.
    """
    height = len(grid)
    width = len(grid[0])
    found = []
    for dr, dc in ((-2, 0), (2, 0), (0, -2), (0, 2)):
        row, col = current.row + dr, current.col + dc
        if not (0 < row < height - 1 and 0 < col < width - 1):
            continue
        if grid[row][col] != CellType.WALL:
            continue
        wall = Position(current.row + dr // 2, current.col + dc // 2)
        found.append((Position(row, col), wall))
    return found


def generate_maze(width: int, height: int, rng: random.Random | None = None) -> Grid:
    """Carve a perfect maze with a randomized depth-first search.

    Cells sit on odd coordinates and the walls between them on even ones,
    so every corridor is a single tile wide. The outer border stays WALL.

    Args:
        width: Requested number of columns.
        height: Requested number of rows.
        rng: Optional Random instance for seeded/testing mazes.

    Returns:
        A grid whose PATH cells form a spanning tree over all cells.
    """
    rng = rng or random.Random()
    width = normalize_dimension(width)
    height = normalize_dimension(height)

    grid = create_grid(width, height, CellType.WALL)
    start = Position(1, 1)
    grid[start.row][start.col] = CellType.PATH
    stack = [start]

    while stack:
        current = stack[-1]
        candidates = _unvisited_cells(current, grid)
        if not candidates:
            stack.pop()
            continue
        cell, wall = rng.choice(candidates)
        grid[wall.row][wall.col] = CellType.PATH
        grid[cell.row][cell.col] = CellType.PATH
        stack.append(cell)

    return grid


def add_loops(
    grid: Grid,
    passes: int,
    chance: float,
    rng: random.Random | None = None,
) -> int:
    """Knock down walls that separate corridors, creating alternate routes.

    Each pass scans every interior WALL cell; one with two or more PATH
    neighbors is opened with independent probability `chance`.

    Args:
        grid: The maze grid (mutated in place).
        passes: Number of scans over the grid.
        chance: Probability of opening each eligible wall per pass.
        rng: Optional Random instance for seeded/testing mazes.

    Returns:
        Number of walls opened.

    Raises:
        ValueError: If passes is negative or chance is outside [0, 1].
    """
    if passes < 0:
        raise ValueError(f"passes must be >= 0, got {passes}")
    if not 0.0 <= chance <= 1.0:
        raise ValueError(f"chance must be within [0, 1], got {chance}")

    rng = rng or random.Random()
    height = len(grid)
    width = len(grid[0]) if grid else 0
    opened = 0

    for _ in range(passes):
        for row in range(1, height - 1):
            for col in range(1, width - 1):
                if grid[row][col] != CellType.WALL:
                    continue
                open_sides = sum(
                    1
                    for r, c in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))
                    if grid[r][c] == CellType.PATH
                )
                if open_sides >= 2 and rng.random() < chance:
                    grid[row][col] = CellType.PATH
                    opened += 1

    logger.debug("Opened %d loop walls over %d passes", opened, passes)
    return opened
