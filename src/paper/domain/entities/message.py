"""Message entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Message:
    """A captured channel message.

    Attributes:
        ts: Platform-specific message ID (Slack timestamp string).
        user_id: Author's user ID.
        text: Message content.
        timestamp: When the message was sent.
        thread_ts: Parent message timestamp (if in a thread).
    """

    ts: str
    user_id: str
    text: str
    timestamp: datetime
    thread_ts: str | None = None

    def is_in_thread(self) -> bool:
        """Check if this message is a thread reply.

        Returns:
            True if the message belongs to a thread other than its own.
        """
        return self.thread_ts is not None and self.thread_ts != self.ts
