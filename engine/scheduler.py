"""Deferred callbacks for the enemy turn and timed effects."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Runs a callback once, some time after it was scheduled."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Schedule `callback` to run after `delay` seconds."""


class ThreadingScheduler(Scheduler):
    """Real-time scheduler backed by daemon timer threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler that only runs callbacks when advanced.

    Callbacks due at the same time run in the order they were scheduled.
    A callback may schedule further callbacks; those run too if they fall
    due within the window being advanced.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        """Number of callbacks not yet run."""
        return len(self._queue)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due.

        Returns:
            Number of callbacks run.
        """
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        self.now = deadline
        return ran

    def run_pending(self) -> int:
        """Run callbacks until none remain, jumping the clock as needed."""
        ran = 0
        while self._queue:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        logger.debug("Manual scheduler drained %d callbacks", ran)
        return ran
