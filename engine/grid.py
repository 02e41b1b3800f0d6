"""Grid helpers, reachability search and shortest paths for Black Echo."""

from __future__ import annotations

from collections import deque

from models.game_state import CellType, Grid, Position

# Up, down, left, right
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class InvalidPositionError(ValueError):
    """Raised when a coordinate lies outside the grid."""


def create_grid(width: int, height: int, fill: CellType = CellType.WALL) -> Grid:
    """Initialize a grid filled with a single cell type.

    Args:
        width: Number of columns.
        height: Number of rows.
        fill: Cell type for every cell.

    Returns:
        A 2D list indexed as grid[row][col].
    """
    return [[fill for _ in range(width)] for _ in range(height)]


def in_bounds(pos: Position, grid: Grid) -> bool:
    """Check if a position is anywhere on the grid, border included."""
    if not grid:
        return False
    return 0 <= pos.row < len(grid) and 0 <= pos.col < len(grid[0])


def is_interior(pos: Position, grid: Grid) -> bool:
    """Check if a position is strictly inside the outer border."""
    if not grid:
        return False
    return 0 < pos.row < len(grid) - 1 and 0 < pos.col < len(grid[0]) - 1


def is_walkable(pos: Position, grid: Grid) -> bool:
    """Check if a position is an interior PATH cell."""
    return is_interior(pos, grid) and grid[pos.row][pos.col] == CellType.PATH


def validate_position(pos: Position, grid: Grid) -> Position:
    """Ensure a position lies on the grid.

    Raises:
        InvalidPositionError: If the position is out of bounds.
    """
    if not in_bounds(pos, grid):
        raise InvalidPositionError(
            f"Position ({pos.row}, {pos.col}) is out of bounds "
            f"for a {len(grid)}x{len(grid[0]) if grid else 0} grid"
        )
    return pos


def manhattan(pos1: Position, pos2: Position) -> int:
    """Calculate the Manhattan distance between two positions."""
    return abs(pos1.row - pos2.row) + abs(pos1.col - pos2.col)


def neighbors(pos: Position, grid: Grid) -> list[Position]:
    """Walkable orthogonal neighbors of a position."""
    result = []
    for dr, dc in DIRECTIONS:
        candidate = Position(pos.row + dr, pos.col + dc)
        if is_walkable(candidate, grid):
            result.append(candidate)
    return result


def path_cells(grid: Grid) -> list[Position]:
    """All interior PATH cells in row-major order."""
    return [
        Position(row, col)
        for row in range(1, len(grid) - 1)
        for col in range(1, len(grid[0]) - 1)
        if grid[row][col] == CellType.PATH
    ]


def reachable(start: Position, steps: int, grid: Grid) -> set[Position]:
    """Get all positions reachable from start in at most `steps` moves.

    Uses BFS over interior PATH cells. Cells discovered at exactly `steps`
    are recorded but not expanded. The start position is excluded.

    Args:
        start: Where the actor stands.
        steps: Movement budget in tiles.
        grid: The maze grid.

    Returns:
        Set of positions with a shortest hop distance in [1, steps].
    """
    if steps <= 0:
        return set()

    dist: dict[Position, int] = {start: 0}
    queue: deque[Position] = deque([start])

    while queue:
        current = queue.popleft()
        if dist[current] >= steps:
            continue
        for nxt in neighbors(current, grid):
            if nxt not in dist:
                dist[nxt] = dist[current] + 1
                queue.append(nxt)

    return {pos for pos, d in dist.items() if 1 <= d <= steps}


def shortest_path(start: Position, goal: Position, grid: Grid) -> list[Position]:
    """Find a shortest walkable path between two positions.

    Args:
        start: First position of the path.
        goal: Last position of the path.
        grid: The maze grid.

    Returns:
        Positions from start to goal inclusive, or [start] if the goal
        cannot be reached.
    """
    came_from: dict[Position, Position | None] = {start: None}
    queue: deque[Position] = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for nxt in neighbors(current, grid):
            if nxt not in came_from:
                came_from[nxt] = current
                queue.append(nxt)

    if goal not in came_from:
        return [start]

    path: list[Position] = []
    node: Position | None = goal
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path
