"""Turn rules: game creation, player actions, enemy turn, win conditions.

Every rule takes the current GameState and mutates it in place. A rule whose
preconditions fail leaves the state untouched and returns an unsuccessful
ActionResult instead of raising.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone

from config import GameSettings
from engine.dice import roll_die
from engine.enemy import detects, next_step
from engine.grid import manhattan, path_cells, reachable, validate_position
from engine.maze import add_loops, generate_maze
from models.actions import ActionResult, ActionType
from models.game_state import (
    EchoMode,
    GameEvent,
    GameState,
    GameStatus,
    GameTurn,
    Position,
    ResultReason,
    TurnPhase,
)

logger = logging.getLogger(__name__)

PLAYER_START = Position(1, 1)

RESULT_MESSAGES = {
    ResultReason.ESCAPED: "You escaped the creature!",
    ResultReason.CAUGHT: "It caught you. No hope remains.",
    ResultReason.DETECTED: "It sensed you in the dark. No hope remains.",
}


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def _choose_far(
    candidates: list[Position],
    constraints: list[tuple[Position, int]],
    rng: random.Random,
) -> Position:
    """Pick a random candidate that keeps every (anchor, min distance) apart.

    If none qualifies, fall back to the candidate whose worst shortfall
    against the constraints is smallest.
    """
    shuffled = list(candidates)
    rng.shuffle(shuffled)
    for pos in shuffled:
        if all(manhattan(pos, anchor) >= min_dist for anchor, min_dist in constraints):
            return pos

    def shortfall(pos: Position) -> int:
        return max(min_dist - manhattan(pos, anchor) for anchor, min_dist in constraints)

    return min(shuffled, key=shortfall)


def create_game(settings: GameSettings, rng: random.Random | None = None) -> GameState:
    """Generate a maze and place the player, enemy and exit.

    Args:
        settings: Maze size, loop density and spawn distances.
        rng: Optional Random instance for seeded/testing games.

    Returns:
        A fresh GameState in LORE status.
    """
    rng = rng or random.Random()
    grid = generate_maze(settings.maze_width, settings.maze_height, rng=rng)
    add_loops(grid, settings.loop_passes, settings.loop_chance, rng=rng)

    player = PLAYER_START
    cells = [p for p in path_cells(grid) if p != player]
    if len(cells) < 2:
        raise ValueError("Maze is too small to place an enemy and an exit")

    exit_pos = _choose_far(cells, [(player, settings.exit_min_distance)], rng)
    enemy = _choose_far(
        [p for p in cells if p != exit_pos],
        [
            (player, settings.enemy_min_distance),
            (exit_pos, settings.enemy_exit_min_distance),
        ],
        rng,
    )

    logger.info(
        "New %dx%d maze: player=%s enemy=%s exit=%s",
        len(grid), len(grid[0]), tuple(player), tuple(enemy), tuple(exit_pos),
    )
    return GameState(grid=grid, player=player, enemy=enemy, exit=exit_pos)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reject(action_type: ActionType, error: str) -> ActionResult:
    logger.debug("Ignored %s: %s", action_type.value, error)
    return ActionResult(
        success=False,
        action_type=action_type,
        description=error,
        error=error,
    )


def _log_event(
    state: GameState,
    action_type: ActionType,
    description: str,
    details: dict | None = None,
) -> GameEvent:
    event = GameEvent(
        turn_number=state.turn_number,
        action_type=action_type.value,
        description=description,
        details=details or {},
        timestamp=datetime.now(timezone.utc),
    )
    state.event_log.append(event)
    return event


def _finish(state: GameState, reason: ResultReason) -> None:
    """Move the session into its terminal status."""
    state.status = GameStatus.WIN if reason == ResultReason.ESCAPED else GameStatus.LOSE
    state.result_reason = reason
    state.result_message = RESULT_MESSAGES[reason]
    state.possible_moves = set()
    logger.info("Game over: %s (%s)", state.status.value, reason.value)


def _player_turn_error(state: GameState) -> str | None:
    if state.status != GameStatus.PLAYING:
        return f"Game is not in progress (status: {state.status.value})"
    if state.turn != GameTurn.PLAYER:
        return "It's not the player's turn"
    return None


# ---------------------------------------------------------------------------
# Player operations
# ---------------------------------------------------------------------------


def start_game(state: GameState) -> ActionResult:
    """Leave the lore screen and begin play."""
    if state.status != GameStatus.LORE:
        return _reject(ActionType.START, f"Game already started (status: {state.status.value})")
    state.status = GameStatus.PLAYING
    description = "The hunt begins."
    _log_event(state, ActionType.START, description)
    return ActionResult(success=True, action_type=ActionType.START, description=description)


def roll_dice(
    state: GameState,
    settings: GameSettings,
    rng: random.Random | None = None,
) -> ActionResult:
    """Roll the die and compute where the player may move this turn."""
    error = _player_turn_error(state)
    if error is None and state.phase != TurnPhase.ROLLING:
        error = "Dice already rolled this turn"
    if error:
        return _reject(ActionType.ROLL, error)

    result = roll_die(settings.die_sides, rng=rng)
    state.dice_result = result
    state.possible_moves = reachable(state.player, result, state.grid)
    state.phase = TurnPhase.MOVING

    description = f"Rolled a {result}: {len(state.possible_moves)} tiles in reach."
    _log_event(state, ActionType.ROLL, description, {"dice_result": result})
    return ActionResult(
        success=True,
        action_type=ActionType.ROLL,
        description=description,
        dice_result=result,
    )


def move_player(state: GameState, to: Position, settings: GameSettings) -> ActionResult:
    """Move the player to one of this turn's possible moves.

    Returns:
        The ActionResult. On success the turn has either ended in WIN/LOSE
        or passed to the enemy; the caller schedules the enemy turn.

    Raises:
        InvalidPositionError: If `to` lies outside the grid.
    """
    to = validate_position(Position(*to), state.grid)

    error = _player_turn_error(state)
    if error is None and state.phase != TurnPhase.MOVING:
        error = "Roll the dice before moving"
    if error is None and to not in state.possible_moves:
        error = f"Position ({to.row}, {to.col}) is not reachable this turn"
    if error:
        return _reject(ActionType.MOVE, error)

    start = state.player
    state.player = to
    if state.echo_active:
        state.echo_active = False
        state.echo_charge = 0

    description = f"Player moves from ({start.row}, {start.col}) to ({to.row}, {to.col})."
    _log_event(state, ActionType.MOVE, description, {"from": list(start), "to": list(to)})

    if state.player == state.exit:
        _finish(state, ResultReason.ESCAPED)
    elif state.player == state.enemy:
        _finish(state, ResultReason.CAUGHT)
    else:
        end_player_turn(state, settings)

    return ActionResult(success=True, action_type=ActionType.MOVE, description=description)


def pass_turn(state: GameState, settings: GameSettings) -> ActionResult:
    """Give up the rest of the player's turn without moving."""
    error = _player_turn_error(state)
    if error:
        return _reject(ActionType.PASS, error)

    description = "Player holds still."
    _log_event(state, ActionType.PASS, description)
    end_player_turn(state, settings)
    return ActionResult(success=True, action_type=ActionType.PASS, description=description)


def activate_echo(state: GameState, settings: GameSettings) -> ActionResult:
    """Spend a full charge to reveal the enemy and the exit."""
    error = _player_turn_error(state)
    if error is None and state.echo_active:
        error = "Echo is already active"
    if error is None and state.echo_charge < settings.max_echo_charge:
        error = f"Echo not charged ({state.echo_charge}/{settings.max_echo_charge})"
    if error:
        return _reject(ActionType.ECHO, error)

    state.echo_active = True
    state.echo_used_this_turn = True
    if settings.echo_mode == EchoMode.TIMED:
        state.echo_charge = 0

    description = "An echo ripples through the maze."
    _log_event(state, ActionType.ECHO, description, {"mode": settings.echo_mode.value})
    return ActionResult(success=True, action_type=ActionType.ECHO, description=description)


def expire_echo(state: GameState) -> ActionResult:
    """End a timed echo whose window has run out."""
    if not state.echo_active:
        return _reject(ActionType.ECHO_EXPIRED, "Echo is not active")
    state.echo_active = False
    description = "The echo fades."
    _log_event(state, ActionType.ECHO_EXPIRED, description)
    return ActionResult(success=True, action_type=ActionType.ECHO_EXPIRED, description=description)


# ---------------------------------------------------------------------------
# Turn flow
# ---------------------------------------------------------------------------


def end_player_turn(state: GameState, settings: GameSettings) -> None:
    """Hand the turn to the enemy.

    A turn without the echo gains one charge. A turn that used it ends the
    effect and leaves the charge empty.
    """
    if state.echo_active or state.echo_used_this_turn:
        state.echo_active = False
        state.echo_used_this_turn = False
        state.echo_charge = 0
    else:
        state.echo_charge = min(state.echo_charge + 1, settings.max_echo_charge)
    state.dice_result = 0
    state.possible_moves = set()
    state.phase = TurnPhase.ROLLING
    state.turn = GameTurn.ENEMY
    state.turn_number += 1


def resolve_enemy_turn(state: GameState) -> ActionResult:
    """Advance the enemy one tile toward the player and check for a kill."""
    if state.status != GameStatus.PLAYING:
        return _reject(ActionType.ENEMY_TURN, f"Game is not in progress (status: {state.status.value})")
    if state.turn != GameTurn.ENEMY:
        return _reject(ActionType.ENEMY_TURN, "It's not the enemy's turn")

    start = state.enemy
    state.enemy = next_step(state.enemy, state.player, state.grid)
    if state.enemy == start:
        description = "The creature waits."
    else:
        description = "The creature creeps closer."
    _log_event(
        state,
        ActionType.ENEMY_TURN,
        description,
        {"from": list(start), "to": list(state.enemy)},
    )

    if state.enemy == state.player:
        _finish(state, ResultReason.CAUGHT)
    elif detects(state.enemy, state.player):
        _finish(state, ResultReason.DETECTED)
    else:
        state.turn = GameTurn.PLAYER
        state.phase = TurnPhase.ROLLING

    return ActionResult(success=True, action_type=ActionType.ENEMY_TURN, description=description)


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


def _revealed(state: GameState) -> bool:
    return state.echo_active or state.turn == GameTurn.ENEMY


def is_enemy_visible(state: GameState) -> bool:
    """Whether the presentation layer may show the enemy's position."""
    return _revealed(state)


def is_exit_visible(state: GameState) -> bool:
    """Whether the presentation layer may show the exit's position."""
    return _revealed(state)
