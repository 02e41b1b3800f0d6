"""WebSocket endpoint for real-time state notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.game import player_view
from engine.session import GameSession
from models.game_state import GameEvent, GameState

logger = logging.getLogger(__name__)

router = APIRouter()

# Connected clients
connections: list[WebSocket] = []


async def broadcast(message: dict[str, Any]) -> None:
    """Send a message to all connected WebSocket clients.

    Args:
        message: The JSON-serializable message to send.
    """
    disconnected = []
    for ws in list(connections):
        try:
            await ws.send_json(message)
        except Exception:
            logger.info("Dropping disconnected WebSocket client")
            disconnected.append(ws)
    for ws in disconnected:
        if ws in connections:
            connections.remove(ws)


def state_message(session: GameSession, event: GameEvent | None = None) -> dict[str, Any]:
    """Build the message pushed to clients after a state change."""
    return {
        "type": "state",
        "event": event.model_dump(mode="json") if event else None,
        "state": player_view(session),
    }


def make_state_listener(session: GameSession, loop: asyncio.AbstractEventLoop):
    """Create a session listener that forwards changes to WebSocket clients.

    Session listeners run on whichever thread mutated the state, so the
    broadcast is handed to the server's event loop.
    """

    def listener(state: GameState, event: GameEvent | None) -> None:
        if not connections or loop.is_closed():
            return
        message = state_message(session, event)
        asyncio.run_coroutine_threadsafe(broadcast(message), loop)

    return listener


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint pushing the player view after every change."""
    await websocket.accept()
    connections.append(websocket)

    try:
        await websocket.send_json(state_message(websocket.app.state.session))

        # Keep connection alive, listen for client messages (ignored)
        while True:
            try:
                await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        if websocket in connections:
            connections.remove(websocket)
