"""Event entity for the internal event queue."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class EventType(Enum):
    """Event types handled by the event loop."""

    FLUSH = "flush"
    BOOTSTRAP = "bootstrap"
    STALE_SWEEP = "stale_sweep"
    CLEANUP = "cleanup"


@dataclass(frozen=True)
class Event:
    """Internal event.

    Attributes:
        type: Event type.
        payload: Event-specific data.
        created_at: Event creation time.
    """

    type: EventType
    payload: dict[str, Any]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def for_channel(
        cls, event_type: EventType, workspace_id: str, channel_id: str
    ) -> "Event":
        """Create a channel-scoped event."""
        return cls(
            type=event_type,
            payload={"workspace_id": workspace_id, "channel_id": channel_id},
        )

    def get_identity_key(self) -> str:
        """Get identity key for duplicate detection.

        Channel-scoped events share a key per channel so that a newer
        event supersedes a pending one.

        Returns:
            Unique key based on event type and payload.
        """
        if self.type in (EventType.FLUSH, EventType.BOOTSTRAP):
            workspace_id = self.payload.get("workspace_id", "")
            channel_id = self.payload.get("channel_id", "")
            return f"{self.type.value}:{workspace_id}:{channel_id}"
        return f"{self.type.value}:global"
