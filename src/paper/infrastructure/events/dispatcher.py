"""Routes events to their handlers."""

import logging
from collections.abc import Awaitable, Callable

from paper.domain.entities.event import Event, EventType

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], Awaitable[None]]


def event_handler(event_type: EventType) -> Callable[[EventHandler], EventHandler]:
    """Mark a coroutine (or bound method) as the handler for an event type.

    Usage:
        @event_handler(EventType.FLUSH)
        async def handle(self, event: Event) -> None:
            ...

    Args:
        event_type: The event type this handler processes.

    Returns:
        Decorator function.
    """

    def decorator(func: EventHandler) -> EventHandler:
        func._event_type = event_type  # type: ignore[attr-defined]
        return func

    return decorator


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventDispatcher:
    """Dispatches events to the handlers registered for their type.

    A failing handler is logged and does not prevent the remaining
    handlers from running.
    """

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._handlers: dict[EventType, list[EventHandler]] = {}

    def register(self, event_type: EventType, handler: EventHandler) -> None:
        """Register a handler for an event type.

        Args:
            event_type: The event type to handle.
            handler: The handler coroutine function.
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Registered %s for %s", _handler_name(handler), event_type.value)

    def register_handler(self, handler: EventHandler) -> None:
        """Register a handler decorated with ``@event_handler``.

        Raises:
            ValueError: The handler was not decorated.
        """
        event_type = getattr(handler, "_event_type", None)
        if event_type is None:
            raise ValueError(
                f"Handler {_handler_name(handler)} has no event type. "
                "Use the @event_handler decorator."
            )
        self.register(event_type, handler)

    def has_handler(self, event_type: EventType) -> bool:
        """Check whether any handler is registered for the type."""
        return bool(self._handlers.get(event_type))

    async def dispatch(self, event: Event) -> None:
        """Run all handlers registered for the event's type.

        Args:
            event: The event to dispatch.
        """
        handlers = self._handlers.get(event.type)
        if not handlers:
            logger.warning("No handler registered for event type: %s", event.type.value)
            return

        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Error in event handler %s for %s",
                    _handler_name(handler),
                    event.get_identity_key(),
                )
