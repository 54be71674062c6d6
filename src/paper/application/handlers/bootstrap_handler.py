"""Bootstrap event handler."""

import logging

from paper.application.services import BootstrapImporter
from paper.domain.entities import Event, EventType
from paper.infrastructure.events.dispatcher import event_handler

logger = logging.getLogger(__name__)


class BootstrapEventHandler:
    """Handler for BOOTSTRAP events.

    Imports channel history the first time a channel is seen.
    """

    def __init__(self, bootstrapper: BootstrapImporter) -> None:
        self._bootstrapper = bootstrapper

    @event_handler(EventType.BOOTSTRAP)
    async def handle(self, event: Event) -> None:
        """Handle BOOTSTRAP event."""
        await self._bootstrapper.bootstrap(
            event.payload["workspace_id"], event.payload["channel_id"]
        )
