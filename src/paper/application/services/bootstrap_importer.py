"""One-time initial canvas population from channel history."""

import logging
from datetime import timedelta

from paper.application.services.canvas_synchronizer import (
    CanvasSynchronizer,
    history_loader,
)
from paper.application.services.channel_state_store import ChannelStateStore
from paper.config import BootstrapConfig
from paper.domain.entities import SyncOutcome, SyncResult

logger = logging.getLogger(__name__)


class BootstrapImporter:
    """Imports trailing history the first time a channel is seen.

    Runs at most once per channel. The ``bootstrapped`` flag is set before
    the first network call and never cleared, so a channel with access
    problems is not retried over and over.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        synchronizer: CanvasSynchronizer,
        config: BootstrapConfig,
    ) -> None:
        """Initialize the importer.

        Args:
            store: Channel state store.
            synchronizer: Canvas synchronizer the import is published through.
            config: Lookback window and thresholds.
        """
        self._store = store
        self._synchronizer = synchronizer
        self._config = config

    def needs_bootstrap(self, workspace_id: str, channel_id: str) -> bool:
        """Check whether a channel has not been bootstrapped yet."""
        state = self._store.get(workspace_id, channel_id)
        return state is None or not state.bootstrapped

    async def bootstrap(self, workspace_id: str, channel_id: str) -> SyncResult | None:
        """Import channel history into the canvas once.

        Fewer than ``min_messages`` usable messages leaves the channel
        bootstrapped without a canvas; regular batching takes over from there.

        Args:
            workspace_id: Workspace ID.
            channel_id: Channel ID.

        Returns:
            The synchronization result, or None if the channel was already
            bootstrapped.
        """
        state = self._store.get_or_create(workspace_id, channel_id)
        if state.bootstrapped:
            logger.debug("%s/%s already bootstrapped", workspace_id, channel_id)
            return None
        if state.busy:
            # Leave the flag unset so the next trigger tries again.
            return SyncResult(SyncOutcome.BUSY, canvas_id=state.canvas_id)

        state.bootstrapped = True
        logger.info("Bootstrapping %s/%s from history", workspace_id, channel_id)

        oldest = self._store.now() - timedelta(days=self._config.lookback_days)
        result = await self._synchronizer.run_cycle(
            state,
            loader=history_loader(channel_id, self._config.max_messages, oldest),
            min_messages=self._config.min_messages,
        )
        logger.info(
            "Bootstrap of %s/%s finished: %s (%d messages)",
            workspace_id,
            channel_id,
            result.outcome.value,
            result.message_count,
        )
        return result
