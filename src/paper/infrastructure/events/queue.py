"""Event queue with per-key replacement and deferred enqueue."""

import asyncio
import logging

from paper.domain.entities.event import Event

logger = logging.getLogger(__name__)


class EventQueue:
    """In-memory event queue.

    Events sharing an identity key supersede each other, so at most one
    event per key is delivered. An immediate event cancels a deferred one
    and makes an already queued one stale. A deferred event replaces the
    one waiting for the same key without moving its deadline, so a steady
    stream of deferred events is still delivered once the first delay
    runs out. Events that are being processed do not block new events
    with the same key.
    """

    def __init__(self) -> None:
        """Initialize the event queue."""
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        # identity_key -> the event that will be delivered for that key
        self._pending: dict[str, Event] = {}
        self._processing: dict[str, Event] = {}
        self._delayed: dict[str, asyncio.Task[None]] = {}
        # identity_key -> the event a deferred task will deliver
        self._delayed_events: dict[str, Event] = {}

    async def enqueue(self, event: Event, delay: float | None = None) -> None:
        """Add an event to the queue.

        Args:
            event: The event to enqueue.
            delay: Seconds to wait before the event becomes deliverable.
                A later deferred enqueue with the same key replaces the
                event but keeps the original deadline.
        """
        key = event.get_identity_key()

        if key in self._pending:
            logger.debug("Superseding pending event %s", key)

        if delay is not None and delay > 0:
            self._delayed_events[key] = event
            if key not in self._delayed:
                self._delayed[key] = asyncio.create_task(
                    self._enqueue_later(key, delay)
                )
            return

        self._cancel_delayed(key)
        self._put(key, event)

    def _put(self, key: str, event: Event) -> None:
        self._pending[key] = event
        self._queue.put_nowait(event)

    def _cancel_delayed(self, key: str) -> None:
        self._delayed_events.pop(key, None)
        task = self._delayed.pop(key, None)
        if task is None:
            return
        task.cancel()
        logger.debug("Cancelled deferred event %s", key)

    async def _enqueue_later(self, key: str, delay: float) -> None:
        await asyncio.sleep(delay)
        if self._delayed.get(key) is not asyncio.current_task():
            return
        del self._delayed[key]
        event = self._delayed_events.pop(key, None)
        if event is not None:
            self._put(key, event)
            logger.debug("Deferred event %s is now queued", key)

    async def dequeue(self) -> Event:
        """Wait for the next deliverable event.

        Superseded events are dropped silently.

        Returns:
            The next event to process.
        """
        while True:
            event = await self._queue.get()
            if self._pending.get(event.get_identity_key()) is event:
                return event
            self._queue.task_done()

    def mark_processing(self, event: Event) -> None:
        """Mark an event as being processed.

        From this point a new event with the same key can be queued.
        """
        key = event.get_identity_key()
        self._pending.pop(key, None)
        self._processing[key] = event

    def mark_done(self, event: Event) -> None:
        """Mark an event as finished."""
        key = event.get_identity_key()
        if self._pending.get(key) is event:
            del self._pending[key]
        if self._processing.get(key) is event:
            del self._processing[key]
        self._queue.task_done()

    def is_scheduled(self, key: str) -> bool:
        """Check whether an event with the given key is deferred or queued."""
        return key in self._delayed or key in self._pending

    def clear(self) -> None:
        """Drop all pending and deferred events."""
        for task in self._delayed.values():
            task.cancel()
        self._delayed.clear()
        self._delayed_events.clear()
        self._pending.clear()
        self._processing.clear()
        logger.info("EventQueue cleared")
