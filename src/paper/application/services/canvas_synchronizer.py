"""Create-or-update protocol for channel canvases."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from paper.application.services.batch_scheduler import BatchScheduler
from paper.application.services.channel_state_store import ChannelStateStore
from paper.application.services.summary_service import SummaryService
from paper.config import CanvasConfig
from paper.domain.entities import (
    CanvasStatus,
    ChannelState,
    Message,
    SummaryResult,
    SyncOutcome,
    SyncResult,
)
from paper.domain.exceptions import (
    CanvasAlreadyExistsError,
    CanvasNotFoundError,
    CanvasPermissionError,
    ChannelNotAccessibleError,
    PaperError,
    WorkspaceNotInstalledError,
)
from paper.domain.services import WorkspaceClient, WorkspaceDirectory

logger = logging.getLogger(__name__)

MessageLoader = Callable[[WorkspaceClient], Awaitable[list[Message]]]


class HistoryUnavailableError(Exception):
    """A message loader could not fetch channel history."""


def history_loader(
    channel_id: str, limit: int, oldest: datetime | None = None
) -> MessageLoader:
    """Create a loader that summarizes channel history instead of the buffer.

    Args:
        channel_id: Channel ID.
        limit: Maximum number of messages to fetch.
        oldest: Only fetch messages after this time.

    Returns:
        Message loader for ``CanvasSynchronizer.run_cycle``.
    """

    async def load(client: WorkspaceClient) -> list[Message]:
        try:
            return await client.fetch_history(channel_id, oldest=oldest, limit=limit)
        except ChannelNotAccessibleError:
            raise
        except PaperError as e:
            raise HistoryUnavailableError(str(e)) from e
        except asyncio.TimeoutError as e:
            raise HistoryUnavailableError("history request timed out") from e

    return load


class CanvasSynchronizer:
    """Runs one summarize-and-publish cycle per channel at a time.

    A cycle holds the channel's busy flag from start to finish. Without a
    cached canvas ID it first asks the platform whether the channel already
    has a canvas, so a canvas is only created when none exists. The busy
    flag is released on every exit path, including timeouts. Messages that
    arrived during a published cycle are checked against the flush
    thresholds again once the flag is released.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        directory: WorkspaceDirectory,
        summary_service: SummaryService,
        config: CanvasConfig,
        scheduler: BatchScheduler | None = None,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            store: Channel state store.
            directory: Workspace directory resolving clients.
            summary_service: Summary builder.
            config: Canvas settings (timeouts, app name).
            scheduler: Re-evaluates flush thresholds after a published cycle.
        """
        self._store = store
        self._directory = directory
        self._summary_service = summary_service
        self._config = config
        self._scheduler = scheduler

    async def run_cycle(
        self,
        state: ChannelState,
        loader: MessageLoader | None = None,
        min_messages: int = 1,
    ) -> SyncResult:
        """Run one synchronization cycle for a channel.

        Args:
            state: Channel state.
            loader: Loads the messages to summarize. When omitted the current
                buffer is summarized.
            min_messages: Minimum number of messages needed to publish.

        Returns:
            How the cycle ended.
        """
        if not state.try_acquire():
            logger.info(
                "Canvas operation already in progress for %s/%s, skipping",
                state.workspace_id,
                state.channel_id,
            )
            return SyncResult(SyncOutcome.BUSY, canvas_id=state.canvas_id)

        purged = False
        try:
            result = await self._run_locked(state, loader, min_messages)
            purged = result.outcome is SyncOutcome.CHANNEL_PURGED
        finally:
            state.release()
            if not purged:
                state.last_flush_at = self._store.now()

        if result.published and self._scheduler is not None:
            await self._scheduler.on_message(state)
        return result

    async def _run_locked(
        self,
        state: ChannelState,
        loader: MessageLoader | None,
        min_messages: int,
    ) -> SyncResult:
        label = f"{state.workspace_id}/{state.channel_id}"
        if state.canvas_status is CanvasStatus.FAILED:
            state.canvas_status = (
                CanvasStatus.IDLE if state.canvas_id else CanvasStatus.UNKNOWN
            )

        try:
            client = await self._directory.resolve(state.workspace_id)
        except WorkspaceNotInstalledError:
            logger.warning("No installation for workspace %s", state.workspace_id)
            return SyncResult(SyncOutcome.NOT_INSTALLED)

        consumed = len(state.messages)
        if loader is None:
            messages = list(state.messages)
        else:
            try:
                messages = await loader(client)
            except ChannelNotAccessibleError:
                return self._purge(state)
            except HistoryUnavailableError:
                logger.warning("History unavailable for %s", label)
                return SyncResult(SyncOutcome.HISTORY_UNAVAILABLE)

        if not messages:
            return SyncResult(SyncOutcome.EMPTY, canvas_id=state.canvas_id)
        if len(messages) < min_messages:
            logger.info(
                "%s has only %d messages, need at least %d",
                label,
                len(messages),
                min_messages,
            )
            return SyncResult(
                SyncOutcome.INSUFFICIENT, len(messages), state.canvas_id
            )

        logger.info("Processing %d messages for %s", len(messages), label)
        summary: SummaryResult | None = None
        try:
            if state.canvas_id is None:
                await self._resolve_existing_canvas(client, state)

            summary = await asyncio.wait_for(
                self._summary_service.build(client, messages),
                timeout=self._config.summary_timeout_seconds,
            )
            outcome = await self._publish(client, state, summary)
        except ChannelNotAccessibleError:
            return self._purge(state)
        except CanvasNotFoundError:
            logger.warning(
                "Canvas %s for %s no longer exists, will recreate",
                state.canvas_id,
                label,
            )
            state.forget_canvas()
            return SyncResult(SyncOutcome.CANVAS_STALE, len(messages))
        except CanvasPermissionError as e:
            logger.warning("Canvas unavailable for %s (%s), posting message", label, e)
            outcome = await self._post_fallback(client, state, messages, summary)
            if outcome is SyncOutcome.CHANNEL_PURGED:
                return self._purge(state)
            if outcome is SyncOutcome.FAILED:
                self._mark_failed(state)
                return SyncResult(outcome, len(messages), state.canvas_id)
        except (asyncio.TimeoutError, PaperError):
            logger.exception("Canvas synchronization failed for %s", label)
            self._mark_failed(state)
            return SyncResult(SyncOutcome.FAILED, len(messages), state.canvas_id)

        self._store.reset(state, consumed)
        return SyncResult(outcome, len(messages), state.canvas_id)

    async def _resolve_existing_canvas(
        self, client: WorkspaceClient, state: ChannelState
    ) -> None:
        """Look up a canvas already attached to the channel."""
        state.canvas_status = CanvasStatus.RESOLVING
        canvas_id = await client.get_channel_canvas_id(state.channel_id)
        if canvas_id:
            logger.info(
                "Found existing canvas %s for %s/%s",
                canvas_id,
                state.workspace_id,
                state.channel_id,
            )
            state.canvas_id = canvas_id
            state.canvas_status = CanvasStatus.IDLE
        else:
            state.canvas_status = CanvasStatus.UNKNOWN

    async def _publish(
        self, client: WorkspaceClient, state: ChannelState, summary: SummaryResult
    ) -> SyncOutcome:
        """Create the canvas if none is known, otherwise replace its content."""
        canvas_id = state.canvas_id
        if canvas_id is None:
            try:
                await self._create(client, state, summary)
                return SyncOutcome.CREATED
            except CanvasAlreadyExistsError:
                # Someone attached a canvas since we looked; adopt it.
                await self._resolve_existing_canvas(client, state)
                if state.canvas_id is None:
                    raise
                canvas_id = state.canvas_id

        await self._update(client, state, canvas_id, summary)
        return SyncOutcome.UPDATED

    async def _create(
        self, client: WorkspaceClient, state: ChannelState, summary: SummaryResult
    ) -> None:
        state.canvas_status = CanvasStatus.CREATING
        logger.info(
            "Creating canvas for %s/%s", state.workspace_id, state.channel_id
        )
        canvas_id = await asyncio.wait_for(
            client.create_canvas(state.channel_id, summary.title, summary.body),
            timeout=self._config.write_timeout_seconds,
        )
        state.canvas_id = canvas_id
        state.canvas_status = CanvasStatus.IDLE
        logger.info("Canvas created: %s", canvas_id)

        if self._config.notify_on_create:
            try:
                await client.post_message(
                    state.channel_id,
                    f"📄 *{self._config.app_name} created: \"{summary.title}\"*\n"
                    "Open the channel canvas to see the summary. "
                    "It updates automatically as the conversation continues.",
                )
            except PaperError as e:
                logger.warning("Could not announce canvas %s: %s", canvas_id, e)

    async def _update(
        self,
        client: WorkspaceClient,
        state: ChannelState,
        canvas_id: str,
        summary: SummaryResult,
    ) -> None:
        state.canvas_status = CanvasStatus.UPDATING
        logger.info("Updating canvas %s", canvas_id)
        await asyncio.wait_for(
            client.replace_canvas_body(canvas_id, summary.body),
            timeout=self._config.write_timeout_seconds,
        )
        state.canvas_status = CanvasStatus.IDLE

        try:
            await asyncio.wait_for(
                client.rename_canvas(canvas_id, summary.title),
                timeout=self._config.write_timeout_seconds,
            )
        except (asyncio.TimeoutError, PaperError) as e:
            logger.info("Could not update canvas title for %s: %s", canvas_id, e)
        logger.info("Canvas updated: %s", canvas_id)

    async def _post_fallback(
        self,
        client: WorkspaceClient,
        state: ChannelState,
        messages: list[Message],
        summary: SummaryResult | None,
    ) -> SyncOutcome:
        """Post the summary as a plain message when canvases are unavailable."""
        if summary is None:
            try:
                summary = await asyncio.wait_for(
                    self._summary_service.build(client, messages),
                    timeout=self._config.summary_timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning("Summary timed out for fallback message")
                return SyncOutcome.FAILED
        text = (
            f"📄 *{self._config.app_name}: Conversation Summary*\n"
            "_(Canvas unavailable - using message format)_\n\n"
            f"{summary.body}"
        )
        try:
            await client.post_message(state.channel_id, text)
        except ChannelNotAccessibleError:
            return SyncOutcome.CHANNEL_PURGED
        except PaperError:
            logger.exception(
                "Error posting fallback summary for %s/%s",
                state.workspace_id,
                state.channel_id,
            )
            return SyncOutcome.FAILED
        logger.info(
            "Summary posted as message for %s/%s", state.workspace_id, state.channel_id
        )
        return SyncOutcome.FALLBACK

    def _mark_failed(self, state: ChannelState) -> None:
        # canvas_id keeps its last known-good value; the next trigger retries.
        state.canvas_status = CanvasStatus.FAILED

    def _purge(self, state: ChannelState) -> SyncResult:
        logger.warning(
            "Channel %s/%s is not accessible, dropping its state",
            state.workspace_id,
            state.channel_id,
        )
        self._store.purge(state.workspace_id, state.channel_id)
        return SyncResult(SyncOutcome.CHANNEL_PURGED)
