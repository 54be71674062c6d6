"""Slack Bolt application and Socket Mode runner."""

import asyncio

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from paper.config import SlackConfig, SlackMode
from paper.infrastructure.slack.workspace_directory import InMemoryWorkspaceDirectory


def create_slack_app(
    config: SlackConfig,
    directory: InMemoryWorkspaceDirectory | None = None,
) -> AsyncApp:
    """Create a Slack Bolt application.

    Single mode uses the static bot token. Multi mode authorizes every
    request against the installations held by ``directory``.

    Args:
        config: Slack connection settings.
        directory: Installation store (required in multi mode).

    Returns:
        Configured AsyncApp instance.

    Raises:
        ValueError: Multi mode without a directory.
    """
    if config.mode is SlackMode.SINGLE:
        return AsyncApp(token=config.bot_token)

    if directory is None:
        raise ValueError("Multi-workspace mode requires a workspace directory")
    return AsyncApp(
        signing_secret=config.signing_secret,
        authorize=directory.authorize,
    )


class SlackAppRunner:
    """Runs the Slack app over Socket Mode."""

    def __init__(self, app: AsyncApp, app_token: str) -> None:
        """Initialize the runner.

        Args:
            app: AsyncApp instance.
            app_token: App-Level Token for Socket Mode.
        """
        self._app = app
        self._app_token = app_token
        self._handler: AsyncSocketModeHandler | None = None

    async def start(self) -> None:
        """Connect and serve events until closed."""
        self._handler = AsyncSocketModeHandler(self._app, self._app_token)
        await self._handler.start_async()

    @property
    def is_connected(self) -> bool:
        """Check whether the Socket Mode connection is open."""
        if self._handler is None:
            return False
        client = self._handler.client
        if client.closed or client.stale:
            return False
        session = client.current_session
        return session is not None and not session.closed

    async def close(self, timeout: float = 5.0) -> bool:
        """Close the handler with timeout.

        Args:
            timeout: Maximum seconds to wait for close.

        Returns:
            True if closed successfully, False if timed out.
        """
        if self._handler is None:
            return True
        handler, self._handler = self._handler, None
        try:
            await asyncio.wait_for(handler.close_async(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False
