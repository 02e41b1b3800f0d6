"""A single game session: state ownership, locking, notifications, timers."""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable

from config import GameSettings, get_settings
from engine import game
from engine.scheduler import Scheduler, ThreadingScheduler
from models.actions import ActionResult, ActionType
from models.game_state import EchoMode, GameEvent, GameState, Position

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, GameEvent | None], None]


class GameSession:
    """Owns one GameState and routes every mutation through the turn rules.

    Accepted operations notify subscribers synchronously before returning.
    Rejected operations change nothing and notify no one.

    The enemy turn and the timed echo expiry are handed to the scheduler.
    Each scheduled callback remembers the session generation it belongs to
    and does nothing if the game has been restarted since.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.scheduler = scheduler or ThreadingScheduler()
        self.rng = rng or random.Random()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._generation = 0
        self._echo_token = 0
        self._state = game.create_game(self.settings, self.rng)

    # -- observation --------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    def snapshot(self) -> GameState:
        """Deep copy of the state taken under the session lock."""
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def enemy_visible(self) -> bool:
        return game.is_enemy_visible(self._state)

    @property
    def exit_visible(self) -> bool:
        return game.is_exit_visible(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        event = self._state.event_log[-1] if self._state.event_log else None
        for listener in list(self._listeners):
            try:
                listener(self._state, event)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _commit(self, result: ActionResult) -> ActionResult:
        if result.success:
            self._notify()
        return result

    # -- lifecycle ----------------------------------------------------------

    def initialize(self) -> ActionResult:
        """Replace the state with a new maze waiting on the lore screen."""
        with self._lock:
            self._generation += 1
            self._state = game.create_game(self.settings, self.rng)
            self._notify()
            return ActionResult(
                success=True,
                action_type=ActionType.INITIALIZE,
                description="A new maze takes shape.",
            )

    def start(self) -> ActionResult:
        with self._lock:
            return self._commit(game.start_game(self._state))

    def restart(self) -> ActionResult:
        """Regenerate everything and go straight to play."""
        with self._lock:
            self._generation += 1
            self._state = game.create_game(self.settings, self.rng)
            game.start_game(self._state)
            self._notify()
            return ActionResult(
                success=True,
                action_type=ActionType.RESTART,
                description="The maze shifts. The hunt begins again.",
            )

    # -- player operations --------------------------------------------------

    def roll_dice(self) -> ActionResult:
        with self._lock:
            return self._commit(game.roll_dice(self._state, self.settings, self.rng))

    def move_player(self, to: Position) -> ActionResult:
        """Move the player; raises InvalidPositionError for off-grid targets."""
        with self._lock:
            result = self._commit(game.move_player(self._state, to, self.settings))
            if result.success:
                self._schedule_enemy_turn()
            return result

    def pass_turn(self) -> ActionResult:
        with self._lock:
            result = self._commit(game.pass_turn(self._state, self.settings))
            if result.success:
                self._schedule_enemy_turn()
            return result

    def activate_echo(self) -> ActionResult:
        with self._lock:
            result = self._commit(game.activate_echo(self._state, self.settings))
            if result.success and self.settings.echo_mode == EchoMode.TIMED:
                self._echo_token += 1
                token = self._echo_token
                self._schedule(
                    self.settings.echo_duration_seconds,
                    lambda: self._expire_echo(token),
                )
            return result

    # -- deferred work ------------------------------------------------------

    def _schedule(self, delay: float, action: Callable[[], ActionResult | None]) -> None:
        generation = self._generation

        def run() -> None:
            with self._lock:
                if generation != self._generation:
                    logger.debug("Dropping a scheduled callback from a previous game")
                    return
                action()

        self.scheduler.call_later(delay, run)

    def _schedule_enemy_turn(self) -> None:
        if self._state.is_over:
            return
        self._schedule(self.settings.enemy_turn_delay_seconds, self._enemy_turn)

    def _enemy_turn(self) -> ActionResult:
        return self._commit(game.resolve_enemy_turn(self._state))

    def _expire_echo(self, token: int) -> ActionResult | None:
        if token != self._echo_token:
            return None
        return self._commit(game.expire_echo(self._state))
