"""Periodic event firing."""

import asyncio
import logging

from paper.domain.entities.event import Event, EventType
from paper.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)


class EventScheduler:
    """Enqueues global maintenance events at fixed intervals.

    Each configured event type fires once per interval. The first firing
    happens one interval after ``start()``, since nothing is stale or idle
    right after startup.
    """

    def __init__(self, queue: EventQueue, intervals: dict[EventType, float]) -> None:
        """Initialize the scheduler.

        Args:
            queue: The event queue to enqueue events to.
            intervals: Seconds between firings, per event type.

        Raises:
            ValueError: An interval is not positive.
        """
        for event_type, interval in intervals.items():
            if interval <= 0:
                raise ValueError(
                    f"Interval for {event_type.value} must be positive, got {interval}"
                )
        self._queue = queue
        self._intervals = dict(intervals)
        self._stop_event = asyncio.Event()
        self._stop_event.set()

    async def start(self) -> None:
        """Fire events until ``stop()`` is called."""
        if not self._stop_event.is_set():
            logger.warning("EventScheduler already running")
            return
        if not self._intervals:
            logger.info("EventScheduler has nothing to schedule")
            return

        self._stop_event.clear()
        logger.info(
            "EventScheduler started: %s",
            ", ".join(f"{t.value}={i}s" for t, i in self._intervals.items()),
        )

        loop = asyncio.get_running_loop()
        started = loop.time()
        last_fired = {event_type: started for event_type in self._intervals}
        poll_interval = max(min(min(self._intervals.values()) / 10, 1.0), 0.01)

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=poll_interval)
                break
            except asyncio.TimeoutError:
                pass
            except asyncio.CancelledError:
                break

            current = loop.time()
            for event_type, interval in self._intervals.items():
                if current - last_fired[event_type] < interval:
                    continue
                last_fired[event_type] = current
                try:
                    await self._queue.enqueue(Event(type=event_type, payload={}))
                    logger.debug("Enqueued %s event", event_type.value)
                except Exception:
                    logger.exception("Error enqueueing %s event", event_type.value)

        logger.info("EventScheduler stopped")

    async def stop(self) -> None:
        """Stop the scheduler."""
        logger.info("Stopping EventScheduler")
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        """Check if the scheduler is running."""
        return not self._stop_event.is_set()
