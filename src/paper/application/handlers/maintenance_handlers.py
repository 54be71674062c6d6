"""Periodic maintenance event handlers."""

import logging

from paper.application.services import BatchScheduler, ChannelStateStore
from paper.domain.entities import Event, EventType
from paper.infrastructure.events.dispatcher import event_handler

logger = logging.getLogger(__name__)


class StaleSweepEventHandler:
    """Handler for STALE_SWEEP events.

    Flushes channels whose conversation went quiet before reaching a
    threshold.
    """

    def __init__(self, scheduler: BatchScheduler) -> None:
        self._scheduler = scheduler

    @event_handler(EventType.STALE_SWEEP)
    async def handle(self, event: Event) -> None:
        """Handle STALE_SWEEP event."""
        logger.debug("Handling STALE_SWEEP event")
        await self._scheduler.sweep_stale()


class CleanupEventHandler:
    """Handler for CLEANUP events.

    Evicts idle channel state.
    """

    def __init__(self, store: ChannelStateStore) -> None:
        self._store = store

    @event_handler(EventType.CLEANUP)
    async def handle(self, event: Event) -> None:
        """Handle CLEANUP event."""
        evicted = self._store.sweep()
        logger.info(
            "Cleanup evicted %d idle channels, %d remain", evicted, len(self._store)
        )
