"""FastAPI app entry point for Black Echo."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.game import router as game_router
from api.ws import make_state_listener, router as ws_router
from engine.session import GameSession
from logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the session's change notifications to the WebSocket feed."""
    loop = asyncio.get_running_loop()
    unsubscribe = app.state.session.subscribe(make_state_listener(app.state.session, loop))
    try:
        yield
    finally:
        unsubscribe()


configure_logging()

app = FastAPI(
    title="Black Echo",
    description="Turn-based maze chase engine: roll, move, and hide from the creature",
    version="0.1.0",
    lifespan=lifespan,
)

# One local session per process
app.state.session = GameSession()

app.include_router(game_router, prefix="/game", tags=["Game"])
app.include_router(ws_router, prefix="/game", tags=["WebSocket"])


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {"name": "Black Echo", "version": "0.1.0", "status": "running"}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"healthy": True}
