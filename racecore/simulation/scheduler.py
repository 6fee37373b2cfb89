"""Deferred work on the simulation clock.

The only work that escapes the tick that started it is slot machine
settlement. Tasks are keyed: scheduling a key again replaces the pending
task, ``flush()`` (called on game over) runs whatever is still pending, and
``invalidate()`` (called on reset) drops everything, so a stale task can
never run against a newer session.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class DeferredTask:
    key: str
    due_ms: float
    callback: Callable[[], None]
    generation: int
    token: int


class DeferredScheduler:
    """Runs callbacks once simulation time reaches their due time."""

    def __init__(self) -> None:
        self._tasks: Dict[str, DeferredTask] = {}
        self._generation = 0
        self._next_token = 0

    @property
    def generation(self) -> int:
        return self._generation

    def schedule(self, key: str, due_ms: float, callback: Callable[[], None]) -> DeferredTask:
        """Schedule ``callback`` at ``due_ms``, replacing any pending task for ``key``."""
        self._next_token += 1
        task = DeferredTask(
            key=key,
            due_ms=due_ms,
            callback=callback,
            generation=self._generation,
            token=self._next_token,
        )
        if key in self._tasks:
            logger.debug(f"Replacing pending task {key!r}")
        self._tasks[key] = task
        return task

    def cancel(self, key: str) -> bool:
        return self._tasks.pop(key, None) is not None

    def invalidate(self) -> int:
        """Drop all pending tasks and start a new generation."""
        self._generation += 1
        self._tasks.clear()
        return self._generation

    def pending(self, key: str) -> Optional[DeferredTask]:
        return self._tasks.get(key)

    def flush(self) -> int:
        """Run every pending task now, regardless of its due time.

        Used when the session ends so in-flight work still lands.
        """
        return self.pump(float("inf"))

    def pump(self, now_ms: float) -> int:
        """Run every task due at ``now_ms``, earliest first.

        Returns:
            Number of callbacks executed
        """
        due: List[DeferredTask] = sorted(
            (task for task in self._tasks.values() if task.due_ms <= now_ms),
            key=lambda task: (task.due_ms, task.token),
        )
        executed = 0
        for task in due:
            current = self._tasks.get(task.key)
            if current is not task or task.generation != self._generation:
                continue
            del self._tasks[task.key]
            task.callback()
            executed += 1
        return executed

    def __len__(self) -> int:
        return len(self._tasks)
