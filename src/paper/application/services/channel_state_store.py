"""In-memory per-channel state store."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from paper.domain.entities import ChannelState, Message

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


class ChannelStateStore:
    """Owns every ChannelState, keyed by (workspace_id, channel_id).

    Records are created lazily on first use and live until purged or
    evicted by ``sweep``.
    """

    def __init__(
        self,
        buffer_cap: int = 100,
        idle_eviction_seconds: float = 3600,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            buffer_cap: Maximum buffered messages per channel.
            idle_eviction_seconds: Idle time after which an empty record is evicted.
            clock: Time source.
        """
        self._states: dict[tuple[str, str], ChannelState] = {}
        self._buffer_cap = buffer_cap
        self._idle_eviction = timedelta(seconds=idle_eviction_seconds)
        self._clock = clock

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    def get(self, workspace_id: str, channel_id: str) -> ChannelState | None:
        """Get a state if it exists."""
        return self._states.get((workspace_id, channel_id))

    def get_or_create(self, workspace_id: str, channel_id: str) -> ChannelState:
        """Get a state, creating it on first use.

        Args:
            workspace_id: Workspace ID.
            channel_id: Channel ID.

        Returns:
            The channel state.
        """
        key = (workspace_id, channel_id)
        state = self._states.get(key)
        if state is None:
            state = ChannelState(
                workspace_id=workspace_id,
                channel_id=channel_id,
                last_flush_at=self._clock(),
            )
            self._states[key] = state
            logger.debug("Created state for %s/%s", workspace_id, channel_id)
        return state

    def append(self, state: ChannelState, message: Message) -> None:
        """Buffer a message, evicting the oldest beyond the cap.

        Args:
            state: Channel state.
            message: Message to buffer.
        """
        state.messages.append(message)
        overflow = len(state.messages) - self._buffer_cap
        if overflow > 0:
            del state.messages[:overflow]
            logger.debug(
                "Trimmed %d old messages for %s/%s",
                overflow,
                state.workspace_id,
                state.channel_id,
            )

    def reset(self, state: ChannelState, consumed_count: int) -> None:
        """Remove exactly the first ``consumed_count`` buffered messages.

        Messages appended while a cycle was in flight stay buffered.

        Args:
            state: Channel state.
            consumed_count: Number of messages the finished cycle consumed.
        """
        if consumed_count <= 0:
            return
        del state.messages[:consumed_count]
        if state.messages:
            logger.debug(
                "Kept %d messages that arrived during processing for %s/%s",
                len(state.messages),
                state.workspace_id,
                state.channel_id,
            )

    def purge(self, workspace_id: str, channel_id: str) -> None:
        """Drop all state of a channel."""
        if self._states.pop((workspace_id, channel_id), None) is not None:
            logger.info("Purged state for %s/%s", workspace_id, channel_id)

    def purge_workspace(self, workspace_id: str) -> int:
        """Drop all states of a workspace.

        Returns:
            Number of purged channels.
        """
        keys = [key for key in self._states if key[0] == workspace_id]
        for key in keys:
            del self._states[key]
        if keys:
            logger.info("Purged %d channels of workspace %s", len(keys), workspace_id)
        return len(keys)

    def states(self) -> list[ChannelState]:
        """Snapshot of all states."""
        return list(self._states.values())

    def sweep(self) -> int:
        """Evict idle states with an empty buffer.

        Returns:
            Number of evicted states.
        """
        cutoff = self._clock() - self._idle_eviction
        evicted = [
            key
            for key, state in self._states.items()
            if not state.messages and not state.busy and state.last_flush_at < cutoff
        ]
        for key in evicted:
            del self._states[key]
        if evicted:
            logger.info("Evicted %d idle channel states", len(evicted))
        return len(evicted)

    def __len__(self) -> int:
        return len(self._states)
