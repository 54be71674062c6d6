"""Uninstall workspace use case."""

import logging

from paper.application.services import ChannelStateStore
from paper.domain.services import WorkspaceDirectory

logger = logging.getLogger(__name__)


class UninstallWorkspaceUseCase:
    """Forgets a workspace after the app was uninstalled or its tokens revoked."""

    def __init__(self, directory: WorkspaceDirectory, store: ChannelStateStore) -> None:
        self._directory = directory
        self._store = store

    async def execute(self, workspace_id: str) -> int:
        """Drop the installation and all channel state of a workspace.

        Returns:
            Number of channel states removed.
        """
        removed = self._directory.delete(workspace_id)
        purged = self._store.purge_workspace(workspace_id)
        logger.info(
            "Uninstalled workspace %s (installation removed: %s, %d channels purged)",
            workspace_id,
            removed,
            purged,
        )
        return purged
