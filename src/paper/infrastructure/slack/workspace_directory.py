"""Workspace directories mapping workspace IDs to clients."""

import logging
from collections.abc import Callable

from slack_bolt.authorization import AuthorizeResult
from slack_sdk.web.async_client import AsyncWebClient

from paper.domain.entities import (
    MultiWorkspaceInstallation,
    SingleWorkspaceInstallation,
)
from paper.domain.exceptions import WorkspaceNotInstalledError
from paper.infrastructure.slack.workspace_client import SlackWorkspaceClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], SlackWorkspaceClient]


def create_workspace_client(bot_token: str) -> SlackWorkspaceClient:
    """Create a workspace client for a bot token."""
    return SlackWorkspaceClient(AsyncWebClient(token=bot_token))


class StaticWorkspaceDirectory:
    """Single-workspace directory backed by one static bot token.

    Every workspace ID resolves to the same client.
    """

    def __init__(
        self,
        installation: SingleWorkspaceInstallation,
        client_factory: ClientFactory = create_workspace_client,
    ) -> None:
        """Initialize the directory.

        Args:
            installation: Installation synthesized from the configured token.
            client_factory: Creates the client from the bot token.
        """
        self._installation = installation
        self._client = client_factory(installation.bot_token)

    async def resolve(self, workspace_id: str) -> SlackWorkspaceClient:
        """Return the workspace client."""
        return self._client

    async def is_installed(self, workspace_id: str) -> bool:
        """Always True; the static token serves any workspace ID."""
        return True

    def find(self, workspace_id: str) -> SingleWorkspaceInstallation:
        """Return the static installation."""
        return self._installation

    def installations(self) -> list[SingleWorkspaceInstallation]:
        """Return all installations."""
        return [self._installation]

    def delete(self, workspace_id: str) -> bool:
        """Keep the static installation; it is owned by the config file."""
        logger.info("Ignoring removal of %s in single-workspace mode", workspace_id)
        return False


class InMemoryWorkspaceDirectory:
    """Multi-workspace directory filled by the OAuth flow.

    Installations live in process memory and are lost on restart, after
    which every workspace has to install the app again. Clients are created
    on first use and cached until the workspace is reinstalled or removed.
    """

    def __init__(self, client_factory: ClientFactory = create_workspace_client) -> None:
        """Initialize the directory.

        Args:
            client_factory: Creates a client from a bot token.
        """
        self._client_factory = client_factory
        self._installations: dict[str, MultiWorkspaceInstallation] = {}
        self._clients: dict[str, SlackWorkspaceClient] = {}

    def save(self, installation: MultiWorkspaceInstallation) -> None:
        """Store or replace the installation of a workspace."""
        workspace_id = installation.workspace_id
        self._installations[workspace_id] = installation
        self._clients.pop(workspace_id, None)
        logger.info(
            "Saved installation for %s (%s)", installation.workspace_name, workspace_id
        )

    def delete(self, workspace_id: str) -> bool:
        """Remove the installation of a workspace.

        Returns:
            True if an installation was removed.
        """
        self._clients.pop(workspace_id, None)
        removed = self._installations.pop(workspace_id, None)
        if removed is not None:
            logger.info("Removed installation for %s", workspace_id)
        return removed is not None

    def find(self, workspace_id: str) -> MultiWorkspaceInstallation | None:
        """Return the installation of a workspace, if any."""
        return self._installations.get(workspace_id)

    def installations(self) -> list[MultiWorkspaceInstallation]:
        """Return all installations."""
        return list(self._installations.values())

    async def resolve(self, workspace_id: str) -> SlackWorkspaceClient:
        """Return the client for a workspace.

        Raises:
            WorkspaceNotInstalledError: The workspace has no installation.
        """
        installation = self._installations.get(workspace_id)
        if installation is None:
            raise WorkspaceNotInstalledError(workspace_id)
        client = self._clients.get(workspace_id)
        if client is None:
            client = self._client_factory(installation.bot_token)
            self._clients[workspace_id] = client
        return client

    async def is_installed(self, workspace_id: str) -> bool:
        """Check whether a workspace has an installation."""
        return workspace_id in self._installations

    async def authorize(
        self,
        enterprise_id: str | None,
        team_id: str | None,
        logger: logging.Logger,
    ) -> AuthorizeResult | None:
        """Slack Bolt ``authorize`` hook.

        Returns:
            Authorization for the team, or None if it is not installed.
        """
        installation = self._installations.get(team_id or "")
        if installation is None:
            logger.warning("No installation for team %s", team_id)
            return None
        return AuthorizeResult(
            enterprise_id=enterprise_id,
            team_id=team_id,
            bot_token=installation.bot_token,
            bot_user_id=installation.bot_user_id,
            bot_scopes=list(installation.scopes),
        )
