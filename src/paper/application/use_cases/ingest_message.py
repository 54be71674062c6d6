"""Ingest message use case."""

import logging

from paper.application.services import BatchScheduler, ChannelStateStore
from paper.domain.entities import Event, EventType, Message
from paper.domain.services import WorkspaceDirectory
from paper.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)


class IngestMessageUseCase:
    """Buffers an incoming channel message and triggers follow-up work.

    The first message seen in a channel queues its history import; later
    messages go through the batch thresholds.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        scheduler: BatchScheduler,
        queue: EventQueue,
        directory: WorkspaceDirectory,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Channel state store.
            scheduler: Batch scheduler deciding on flushes.
            queue: Event queue receiving BOOTSTRAP events.
            directory: Workspace directory (installation check).
        """
        self._store = store
        self._scheduler = scheduler
        self._queue = queue
        self._directory = directory

    async def execute(self, workspace_id: str, channel_id: str, message: Message) -> bool:
        """Buffer a message.

        Messages from workspaces without an installation are dropped
        without touching any state.

        Args:
            workspace_id: Workspace ID.
            channel_id: Channel ID.
            message: The captured message.

        Returns:
            True if the message was buffered.
        """
        if not await self._directory.is_installed(workspace_id):
            logger.debug("Ignoring message from uninstalled workspace %s", workspace_id)
            return False

        state = self._store.get_or_create(workspace_id, channel_id)
        self._store.append(state, message)
        logger.debug(
            "Buffered message %s for %s/%s (%d buffered)",
            message.ts,
            workspace_id,
            channel_id,
            len(state.messages),
        )

        if not state.bootstrapped:
            await self._queue.enqueue(
                Event.for_channel(EventType.BOOTSTRAP, workspace_id, channel_id)
            )
            return True

        await self._scheduler.on_message(state)
        return True
