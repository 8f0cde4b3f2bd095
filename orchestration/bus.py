"""Event bus - EventBusProtocol and InMemoryEventBus."""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from .events import Event

EventHandler = Callable[[Event], Awaitable[None]]

logger = logging.getLogger(__name__)


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations."""

    async def publish(self, event: Event) -> None:
        """Publish an event.

        Args:
            event: Event to publish
        """
        ...

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event name.

        Args:
            event_name: Event name to subscribe to
            handler: Async handler function
        """
        ...


class InMemoryEventBus(EventBusProtocol):
    """In-memory event bus implementation.

    A failing handler is logged and never affects the publisher or the
    other handlers.
    """

    def __init__(self) -> None:
        """Initialize in-memory event bus."""
        self._handlers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event name.

        Args:
            event_name: Event name to subscribe to, or ``"*"`` for every event
            handler: Async handler function
        """
        self._handlers.setdefault(event_name, []).append(handler)

    async def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Args:
            event: Event to publish
        """
        handlers = self._handlers.get(event.name, []) + self._handlers.get("*", [])
        if not handlers:
            return

        logger.debug(
            f"Publishing {event.name} for execution {event.metadata.execution_id} "
            f"to {len(handlers)} handler(s)"
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as exc:
                logger.error(f"Handler error for {event.name} ({handler}): {exc}", exc_info=True)
