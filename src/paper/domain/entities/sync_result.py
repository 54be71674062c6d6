"""Synchronization cycle result."""

from dataclasses import dataclass
from enum import Enum


class SyncOutcome(Enum):
    """How a synchronization cycle ended."""

    CREATED = "created"
    UPDATED = "updated"
    FALLBACK = "fallback"
    BUSY = "busy"
    EMPTY = "empty"
    INSUFFICIENT = "insufficient"
    FAILED = "failed"
    CANVAS_STALE = "canvas_stale"
    CHANNEL_PURGED = "channel_purged"
    NOT_INSTALLED = "not_installed"
    HISTORY_UNAVAILABLE = "history_unavailable"


_PUBLISHED = frozenset({SyncOutcome.CREATED, SyncOutcome.UPDATED, SyncOutcome.FALLBACK})


@dataclass(frozen=True)
class SyncResult:
    """Result of a synchronization cycle.

    Attributes:
        outcome: How the cycle ended.
        message_count: Number of messages summarized (0 if none).
        canvas_id: Canvas ID known after the cycle.
    """

    outcome: SyncOutcome
    message_count: int = 0
    canvas_id: str | None = None

    @property
    def published(self) -> bool:
        """Whether the summary reached the user (canvas or fallback message)."""
        return self.outcome in _PUBLISHED
