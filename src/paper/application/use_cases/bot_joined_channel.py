"""Bot joined channel use case."""

import logging

from paper.application.services import BootstrapImporter
from paper.domain.entities import Event, EventType
from paper.domain.services import WorkspaceDirectory
from paper.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)


class BotJoinedChannelUseCase:
    """Queues the history import when the bot is added to a channel."""

    def __init__(
        self,
        bootstrapper: BootstrapImporter,
        queue: EventQueue,
        directory: WorkspaceDirectory,
    ) -> None:
        self._bootstrapper = bootstrapper
        self._queue = queue
        self._directory = directory

    async def execute(self, workspace_id: str, channel_id: str) -> bool:
        """Queue a BOOTSTRAP event for the channel.

        Returns:
            True if an import was queued.
        """
        if not await self._directory.is_installed(workspace_id):
            logger.warning(
                "Added to %s in uninstalled workspace %s", channel_id, workspace_id
            )
            return False
        if not self._bootstrapper.needs_bootstrap(workspace_id, channel_id):
            return False

        logger.info("Joined %s/%s, queueing history import", workspace_id, channel_id)
        await self._queue.enqueue(
            Event.for_channel(EventType.BOOTSTRAP, workspace_id, channel_id)
        )
        return True
