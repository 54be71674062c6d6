"""Domain entities."""

from paper.domain.entities.channel_state import CanvasStatus, ChannelState
from paper.domain.entities.event import Event, EventType
from paper.domain.entities.installation import (
    Installation,
    MultiWorkspaceInstallation,
    SingleWorkspaceInstallation,
)
from paper.domain.entities.message import Message
from paper.domain.entities.summary import SummaryResult
from paper.domain.entities.sync_result import SyncOutcome, SyncResult

__all__ = [
    "CanvasStatus",
    "ChannelState",
    "Event",
    "EventType",
    "Installation",
    "Message",
    "MultiWorkspaceInstallation",
    "SingleWorkspaceInstallation",
    "SummaryResult",
    "SyncOutcome",
    "SyncResult",
]
