"""Player action, state retrieval, and game log endpoints."""

from fastapi import APIRouter, HTTPException, Request

from engine.game import is_enemy_visible, is_exit_visible
from engine.grid import InvalidPositionError
from engine.session import GameSession
from models.actions import ActionResult, MoveRequest
from models.game_state import Position

router = APIRouter()


def _get_session(request: Request) -> GameSession:
    """Get the singleton session from app state."""
    return request.app.state.session


def player_view(session: GameSession) -> dict:
    """Serialize the state as the player is allowed to see it.

    Enemy and exit positions are null unless currently revealed. The result
    screen shows the whole board once the game is over.
    """
    state = session.snapshot()
    data = state.model_dump(mode="json", exclude={"event_log", "possible_moves"})
    data["possible_moves"] = [list(pos) for pos in sorted(state.possible_moves)]
    data["enemy_visible"] = is_enemy_visible(state)
    data["exit_visible"] = is_exit_visible(state)
    if not (data["enemy_visible"] or state.is_over):
        data["enemy"] = None
    if not (data["exit_visible"] or state.is_over):
        data["exit"] = None
    data["max_echo_charge"] = session.settings.max_echo_charge
    data["die_sides"] = session.settings.die_sides
    return data


def _accepted(result: ActionResult) -> ActionResult:
    """Turn a rejected operation into an HTTP 409."""
    if not result.success:
        raise HTTPException(status_code=409, detail=result.error)
    return result


@router.get("/state")
def get_game_state(request: Request) -> dict:
    """Get the current state from the player's perspective."""
    return player_view(_get_session(request))


@router.post("/start", response_model=ActionResult)
def start_game(request: Request) -> ActionResult:
    """Leave the lore screen."""
    return _accepted(_get_session(request).start())


@router.post("/restart", response_model=ActionResult)
def restart_game(request: Request) -> ActionResult:
    """Throw away the current maze and start over."""
    return _accepted(_get_session(request).restart())


@router.post("/roll", response_model=ActionResult)
def roll_dice(request: Request) -> ActionResult:
    """Roll the die for the player's turn."""
    return _accepted(_get_session(request).roll_dice())


@router.post("/move", response_model=ActionResult)
def move_player(move: MoveRequest, request: Request) -> ActionResult:
    """Move the player to one of the possible moves."""
    try:
        result = _get_session(request).move_player(Position(move.row, move.col))
    except InvalidPositionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _accepted(result)


@router.post("/pass", response_model=ActionResult)
def pass_turn(request: Request) -> ActionResult:
    """End the player's turn without moving."""
    return _accepted(_get_session(request).pass_turn())


@router.post("/echo", response_model=ActionResult)
def activate_echo(request: Request) -> ActionResult:
    """Spend a full echo charge."""
    return _accepted(_get_session(request).activate_echo())


@router.get("/log")
def get_game_log(request: Request) -> list[dict]:
    """Get the event log for the current game."""
    state = _get_session(request).snapshot()
    return [event.model_dump(mode="json") for event in state.event_log]
