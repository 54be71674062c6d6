"""Per-channel batching and canvas state."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from paper.domain.entities.message import Message


class CanvasStatus(Enum):
    """Local knowledge of the channel canvas."""

    UNKNOWN = "unknown"
    RESOLVING = "resolving"
    CREATING = "creating"
    UPDATING = "updating"
    IDLE = "idle"
    FAILED = "failed"


@dataclass
class ChannelState:
    """State for one (workspace, channel) pair.

    Only one synchronization cycle may hold ``busy`` at a time. The flag is
    taken with ``try_acquire`` which has no suspension point, so under
    asyncio the check-and-set cannot interleave with another coroutine.

    Attributes:
        workspace_id: Workspace (team) ID.
        channel_id: Channel ID.
        last_flush_at: When the last synchronization cycle finished.
        messages: Buffered messages, oldest first.
        canvas_id: Cached canvas document ID.
        canvas_status: Where the canvas state machine currently is.
        busy: Whether a synchronization cycle is in flight.
        bootstrapped: Whether the one-time history import has run.
    """

    workspace_id: str
    channel_id: str
    last_flush_at: datetime
    messages: list[Message] = field(default_factory=list)
    canvas_id: str | None = None
    canvas_status: CanvasStatus = CanvasStatus.UNKNOWN
    busy: bool = False
    bootstrapped: bool = False

    @property
    def key(self) -> tuple[str, str]:
        """Store key of this state."""
        return (self.workspace_id, self.channel_id)

    def try_acquire(self) -> bool:
        """Take the busy flag.

        Returns:
            True if the flag was free and is now held by the caller.
        """
        if self.busy:
            return False
        self.busy = True
        return True

    def release(self) -> None:
        """Release the busy flag."""
        self.busy = False

    def forget_canvas(self) -> None:
        """Drop the cached canvas ID so the next cycle resolves or creates again."""
        self.canvas_id = None
        self.canvas_status = CanvasStatus.UNKNOWN
