"""Decides when buffered messages should be summarized."""

import logging
from datetime import timedelta

from paper.application.services.channel_state_store import ChannelStateStore
from paper.config import BatchConfig
from paper.domain.entities import ChannelState, Event, EventType
from paper.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)


class BatchScheduler:
    """Count- and time-based flush triggering.

    A channel is flushed once it has buffered ``message_limit`` messages or
    ``time_window_seconds`` have passed since its last flush, whichever comes
    first. Flushes are queued as deferred FLUSH events keyed per channel, so
    a newer trigger replaces a pending one instead of piling up.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        queue: EventQueue,
        config: BatchConfig,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Channel state store.
            queue: Event queue receiving FLUSH events.
            config: Batching thresholds.
        """
        self._store = store
        self._queue = queue
        self._config = config

    def elapsed_since_flush(self, state: ChannelState) -> timedelta:
        """Time since the channel's last flush."""
        return self._store.now() - state.last_flush_at

    def should_flush(self, state: ChannelState) -> bool:
        """Check whether a channel crossed a flush threshold.

        Args:
            state: Channel state.

        Returns:
            True if the channel has messages, is not busy, and either
            threshold is reached.
        """
        if state.busy or not state.messages:
            return False
        if len(state.messages) >= self._config.message_limit:
            return True
        window = timedelta(seconds=self._config.time_window_seconds)
        return self.elapsed_since_flush(state) >= window

    async def on_message(self, state: ChannelState) -> bool:
        """Evaluate thresholds after a message was buffered.

        Args:
            state: Channel state the message was appended to.

        Returns:
            True if a flush was scheduled.
        """
        if not self.should_flush(state):
            return False

        logger.info(
            "Scheduling flush for %s/%s: %d messages, %ds since last flush",
            state.workspace_id,
            state.channel_id,
            len(state.messages),
            int(self.elapsed_since_flush(state).total_seconds()),
        )
        await self._queue.enqueue(
            Event.for_channel(EventType.FLUSH, state.workspace_id, state.channel_id),
            delay=self._config.flush_delay_seconds,
        )
        return True

    async def sweep_stale(self) -> int:
        """Force-flush channels whose buffered activity has gone stale.

        Returns:
            Number of channels a flush was queued for.
        """
        stale_window = timedelta(seconds=self._config.stale_window_seconds)
        count = 0
        for state in self._store.states():
            if state.busy or not state.messages:
                continue
            if self.elapsed_since_flush(state) < stale_window:
                continue
            await self._queue.enqueue(
                Event.for_channel(
                    EventType.FLUSH, state.workspace_id, state.channel_id
                )
            )
            count += 1

        if count:
            logger.info("Queued stale flush for %d channels", count)
        return count
