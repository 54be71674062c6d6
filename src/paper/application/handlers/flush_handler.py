"""Flush event handler."""

import logging

from paper.application.services import CanvasSynchronizer, ChannelStateStore
from paper.domain.entities import Event, EventType
from paper.infrastructure.events.dispatcher import event_handler

logger = logging.getLogger(__name__)


class FlushEventHandler:
    """Handler for FLUSH events.

    Summarizes the channel buffer into the canvas.
    """

    def __init__(
        self, store: ChannelStateStore, synchronizer: CanvasSynchronizer
    ) -> None:
        """Initialize the handler.

        Args:
            store: Channel state store.
            synchronizer: Canvas synchronizer.
        """
        self._store = store
        self._synchronizer = synchronizer

    @event_handler(EventType.FLUSH)
    async def handle(self, event: Event) -> None:
        """Handle FLUSH event.

        Args:
            event: The FLUSH event.
        """
        workspace_id = event.payload["workspace_id"]
        channel_id = event.payload["channel_id"]

        state = self._store.get(workspace_id, channel_id)
        if state is None or not state.messages:
            logger.debug("Nothing to flush for %s/%s", workspace_id, channel_id)
            return

        result = await self._synchronizer.run_cycle(state)
        logger.info(
            "Flush of %s/%s: %s (%d messages)",
            workspace_id,
            channel_id,
            result.outcome.value,
            result.message_count,
        )
