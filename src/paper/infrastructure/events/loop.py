"""Event processing loop."""

import asyncio
import logging

from paper.domain.entities.event import Event
from paper.infrastructure.events.dispatcher import EventDispatcher
from paper.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)


class EventLoop:
    """Dequeues events and dispatches each one in its own task.

    Work for different channels runs concurrently; per-channel exclusion is
    left to the handlers.
    """

    def __init__(self, queue: EventQueue, dispatcher: EventDispatcher) -> None:
        """Initialize the event loop.

        Args:
            queue: The event queue to read from.
            dispatcher: The dispatcher to send events to.
        """
        self._queue = queue
        self._dispatcher = dispatcher
        self._tasks: set[asyncio.Task[None]] = set()
        self._stop_event = asyncio.Event()
        self._stop_event.set()

    async def start(self) -> None:
        """Process events until ``stop()`` is called."""
        if not self._stop_event.is_set():
            logger.warning("EventLoop already running")
            return

        self._stop_event.clear()
        logger.info("EventLoop started")

        while not self._stop_event.is_set():
            try:
                event = await asyncio.wait_for(self._queue.dequeue(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break

            logger.debug("Processing event: %s", event.get_identity_key())
            self._queue.mark_processing(event)
            task = asyncio.create_task(self._process(event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        logger.info("EventLoop stopped")

    async def _process(self, event: Event) -> None:
        try:
            await self._dispatcher.dispatch(event)
        finally:
            self._queue.mark_done(event)

    async def stop(self, timeout: float = 10.0) -> None:
        """Stop the loop and wait for in-flight events.

        Args:
            timeout: Seconds to wait for in-flight events before cancelling.
        """
        logger.info("Stopping EventLoop")
        self._stop_event.set()
        self._queue.clear()

        if not self._tasks:
            return
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("Cancelled %d in-flight events", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)

    @property
    def in_flight(self) -> int:
        """Number of events currently being processed."""
        return len(self._tasks)

    @property
    def is_running(self) -> bool:
        """Check if the event loop is running."""
        return not self._stop_event.is_set()
