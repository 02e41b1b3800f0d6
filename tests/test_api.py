"""Tests for the HTTP and WebSocket surface."""

import random

import pytest
from fastapi.testclient import TestClient

from api.game import player_view
from config import GameSettings
from engine.scheduler import ManualScheduler
from engine.session import GameSession
from main import app
from models.game_state import GameStatus


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def client(scheduler):
    """Test client around a fresh session on a manual clock."""
    app.state.session = GameSession(
        settings=GameSettings(),
        scheduler=scheduler,
        rng=random.Random(1234),
    )
    with TestClient(app) as c:
        yield c


class TestServiceEndpoints:
    def test_root(self, client):
        assert client.get("/").json()["name"] == "Black Echo"

    def test_health(self, client):
        assert client.get("/health").json() == {"healthy": True}


class TestGameEndpoints:
    def test_initial_state_hides_enemy_and_exit(self, client):
        data = client.get("/game/state").json()
        assert data["status"] == "lore"
        assert data["enemy"] is None
        assert data["exit"] is None
        assert data["player"] == [1, 1]
        assert data["enemy_visible"] is False
        assert len(data["grid"]) == 21
        assert data["grid"][0][0] == "wall"

    def test_roll_before_start_rejected(self, client):
        resp = client.post("/game/roll")
        assert resp.status_code == 409

    def test_start_then_roll(self, client):
        assert client.post("/game/start").json()["success"] is True
        resp = client.post("/game/roll")
        assert resp.status_code == 200
        rolled = resp.json()["dice_result"]
        assert 1 <= rolled <= GameSettings().die_sides

        data = client.get("/game/state").json()
        assert data["phase"] == "moving"
        assert data["dice_result"] == rolled
        assert len(data["possible_moves"]) > 0

    def test_move_to_reachable_tile(self, client):
        client.post("/game/start")
        client.post("/game/roll")
        row, col = client.get("/game/state").json()["possible_moves"][0]
        resp = client.post("/game/move", json={"row": row, "col": col})
        assert resp.status_code == 200
        assert client.get("/game/state").json()["player"] == [row, col]

    def test_move_off_grid_is_bad_request(self, client):
        client.post("/game/start")
        client.post("/game/roll")
        resp = client.post("/game/move", json={"row": 50, "col": 50})
        assert resp.status_code == 400

    def test_move_before_roll_conflicts(self, client):
        client.post("/game/start")
        resp = client.post("/game/move", json={"row": 1, "col": 2})
        assert resp.status_code == 409

    def test_pass_reveals_enemy_until_enemy_moves(self, client, scheduler):
        client.post("/game/start")
        assert client.post("/game/pass").status_code == 200

        data = client.get("/game/state").json()
        assert data["turn"] == "enemy"
        assert data["enemy"] is not None
        assert data["echo_charge"] == 1

        scheduler.run_pending()
        data = client.get("/game/state").json()
        assert data["turn"] == "player"
        assert data["enemy"] is None

    def test_echo_needs_charge(self, client):
        client.post("/game/start")
        assert client.post("/game/echo").status_code == 409

    def test_restart(self, client):
        client.post("/game/start")
        client.post("/game/pass")
        assert client.post("/game/restart").status_code == 200
        data = client.get("/game/state").json()
        assert data["status"] == "playing"
        assert data["echo_charge"] == 0

    def test_log(self, client):
        client.post("/game/start")
        client.post("/game/roll")
        log = client.get("/game/log").json()
        assert [entry["action_type"] for entry in log] == ["start", "roll"]


class TestWebSocket:
    def test_connect_receives_state(self, client):
        with client.websocket_connect("/game/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "state"
            assert message["state"]["status"] == "lore"


class TestPlayerView:
    def _finished_session(self, status):
        session = GameSession(
            settings=GameSettings(),
            scheduler=ManualScheduler(),
            rng=random.Random(7),
        )
        session._state.status = status
        return session

    @pytest.mark.parametrize("status", [GameStatus.WIN, GameStatus.LOSE])
    def test_result_screen_shows_board(self, status):
        session = self._finished_session(status)
        data = player_view(session)
        assert data["enemy"] == list(session.state.enemy)
        assert data["exit"] == list(session.state.exit)
        assert data["enemy_visible"] is False
        assert data["exit_visible"] is False
