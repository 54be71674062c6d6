"""Domain service protocols."""

from datetime import datetime
from typing import Protocol

from paper.domain.entities import Installation, Message


class WorkspaceClient(Protocol):
    """Capability handle for one workspace (platform-independent).

    Implementations translate platform errors into the exceptions of
    ``paper.domain.exceptions``.
    """

    async def post_message(self, channel_id: str, text: str) -> None:
        """Post a plain message to a channel."""
        ...

    async def fetch_history(
        self,
        channel_id: str,
        oldest: datetime | None = None,
        limit: int = 100,
    ) -> list[Message]:
        """Fetch content messages of a channel.

        Args:
            channel_id: Channel ID.
            oldest: Only return messages after this time.
            limit: Maximum number of messages to return.

        Returns:
            Messages in chronological order (oldest first), excluding
            system messages, bot messages and empty text.
        """
        ...

    async def get_channel_canvas_id(self, channel_id: str) -> str | None:
        """Return the ID of the canvas attached to the channel, if any."""
        ...

    async def create_canvas(self, channel_id: str, title: str, body: str) -> str:
        """Create the channel canvas and return its ID."""
        ...

    async def replace_canvas_body(self, canvas_id: str, body: str) -> None:
        """Replace the whole canvas content."""
        ...

    async def rename_canvas(self, canvas_id: str, title: str) -> None:
        """Change the canvas title."""
        ...

    async def resolve_user_display_name(self, user_id: str) -> str:
        """Return a human-readable name for a user."""
        ...

    async def resolve_user_timezone(self, user_id: str) -> str | None:
        """Return the user's IANA timezone, if known."""
        ...


class WorkspaceDirectory(Protocol):
    """Maps a workspace ID to its capability handle."""

    async def resolve(self, workspace_id: str) -> WorkspaceClient:
        """Resolve a workspace client.

        Raises:
            WorkspaceNotInstalledError: The workspace has no installation.
        """
        ...

    async def is_installed(self, workspace_id: str) -> bool:
        """Check whether a workspace can be resolved."""
        ...

    def find(self, workspace_id: str) -> Installation | None:
        """Return the installation serving a workspace, if any."""
        ...

    def installations(self) -> list[Installation]:
        """Return all known installations."""
        ...

    def delete(self, workspace_id: str) -> bool:
        """Forget a workspace installation.

        Returns:
            True if an installation was removed.
        """
        ...


class SummaryGateway(Protocol):
    """Text generation service producing summaries and titles."""

    async def summarize(
        self,
        transcript: list[str],
        user_names: dict[str, str],
        message_count: int,
    ) -> str:
        """Summarize a transcript.

        Args:
            transcript: Lines of ``"<name>: <text>"`` in chronological order.
            user_names: Mapping of user ID to display name.
            message_count: Number of messages in the conversation.

        Returns:
            Formatted summary text.
        """
        ...

    async def generate_title(self, summary: str) -> str:
        """Generate a short title for a summary."""
        ...
