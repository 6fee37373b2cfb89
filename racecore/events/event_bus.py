"""Synchronous event bus for domain event dispatch.

The bus is owned by a single engine; there is no process-wide instance.
Handlers run synchronously in registration order, so the order of
side effects inside a tick stays deterministic.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


class EventBus:
    """Synchronous event bus for domain events.

    Example:
        bus = EventBus()
        bus.subscribe(GameOverEvent, recorder.on_game_over)
        bus.emit(GameOverEvent(...))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def emit(self, event: object) -> None:
        """Emit an event to all handlers registered for its type."""
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in list(handlers):
                handler(event)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for a specific event type."""
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler.

        Returns:
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))
