"""Handle mention use case."""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from paper.application.services import (
    BootstrapImporter,
    CanvasSynchronizer,
    ChannelStateStore,
    history_loader,
)
from paper.config import CanvasConfig
from paper.domain.entities import SyncOutcome, SyncResult
from paper.domain.services import WorkspaceDirectory

logger = logging.getLogger(__name__)

Say = Callable[[str], Awaitable[Any]]


class MentionCommand(Enum):
    """Commands understood in a mention."""

    SUMMARY = "summary"
    STATUS = "status"
    HELP = "help"


def parse_command(text: str) -> MentionCommand:
    """Pick the command a mention asks for.

    ``summary``/``update`` request a manual summary and ``debug``/``status``
    a status report; anything else gets the help text.
    """
    lowered = text.lower()
    if "summary" in lowered or "update" in lowered:
        return MentionCommand.SUMMARY
    if "debug" in lowered or "status" in lowered:
        return MentionCommand.STATUS
    return MentionCommand.HELP


class HandleMentionUseCase:
    """Answers commands addressed to the bot.

    Every command gets exactly one reply, including when the workspace is
    not installed or the cycle fails.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        directory: WorkspaceDirectory,
        synchronizer: CanvasSynchronizer,
        bootstrapper: BootstrapImporter,
        config: CanvasConfig,
        install_url: str | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Channel state store.
            directory: Workspace directory.
            synchronizer: Canvas synchronizer for manual summaries.
            bootstrapper: History importer for channels seen the first time.
            config: Canvas settings (app name, manual thresholds).
            install_url: Where users can install the app (shown in replies).
        """
        self._store = store
        self._directory = directory
        self._synchronizer = synchronizer
        self._bootstrapper = bootstrapper
        self._config = config
        self._install_url = install_url

    async def execute(
        self, workspace_id: str, channel_id: str, text: str, say: Say
    ) -> None:
        """Run the command contained in a mention and reply to it.

        Args:
            workspace_id: Workspace ID.
            channel_id: Channel the mention was posted in.
            text: Mention text.
            say: Posts a reply in the channel.
        """
        command = parse_command(text)
        logger.info(
            "Mention in %s/%s: command=%s", workspace_id, channel_id, command.value
        )

        try:
            if command is MentionCommand.SUMMARY:
                reply = await self._summarize(workspace_id, channel_id)
            elif command is MentionCommand.STATUS:
                reply = await self._status(workspace_id, channel_id)
            else:
                reply = self._help()
        except Exception:
            logger.exception("Error handling mention in %s/%s", workspace_id, channel_id)
            reply = "❌ Sorry, something went wrong. Please try again later."

        await say(reply)

    async def _summarize(self, workspace_id: str, channel_id: str) -> str:
        if not await self._directory.is_installed(workspace_id):
            return self._install_required(workspace_id)

        if self._bootstrapper.needs_bootstrap(workspace_id, channel_id):
            result = await self._bootstrapper.bootstrap(workspace_id, channel_id)
            if result is not None and result.outcome not in (
                SyncOutcome.EMPTY,
                SyncOutcome.INSUFFICIENT,
            ):
                return self._reply_for(result, workspace_id)

        result = await self._manual_cycle(workspace_id, channel_id)
        if result.outcome is SyncOutcome.CANVAS_STALE:
            # The cached canvas was deleted; the retry creates a new one.
            result = await self._manual_cycle(workspace_id, channel_id)
        return self._reply_for(result, workspace_id)

    async def _manual_cycle(self, workspace_id: str, channel_id: str) -> SyncResult:
        state = self._store.get_or_create(workspace_id, channel_id)
        return await self._synchronizer.run_cycle(
            state,
            loader=history_loader(channel_id, self._config.manual_history_limit),
            min_messages=self._config.manual_min_messages,
        )

    def _reply_for(self, result: SyncResult, workspace_id: str) -> str:
        count = result.message_count
        outcome = result.outcome
        if outcome in (SyncOutcome.CREATED, SyncOutcome.UPDATED):
            return (
                f"📄 Canvas updated with summary of {count} messages! "
                "Check the channel canvas for the latest insights."
            )
        if outcome is SyncOutcome.FALLBACK:
            return (
                f"📄 Canvases aren't available here, so I posted the summary of "
                f"{count} messages as a message instead."
            )
        if outcome is SyncOutcome.BUSY:
            return "⏳ I'm already updating the canvas for this channel. Try again in a moment."
        if outcome is SyncOutcome.EMPTY:
            return "📄 No messages found in this channel."
        if outcome is SyncOutcome.INSUFFICIENT:
            return (
                f"📄 Need at least {self._config.manual_min_messages} messages to "
                "create a meaningful summary! Have a conversation and try again."
            )
        if outcome is SyncOutcome.HISTORY_UNAVAILABLE:
            return (
                "❌ Sorry, I couldn't fetch the conversation history. "
                "Please check my permissions or add me to the channel again."
            )
        if outcome is SyncOutcome.CHANNEL_PURGED:
            return "❌ I can't access this channel. Please add me to it again."
        if outcome is SyncOutcome.NOT_INSTALLED:
            return self._install_required(workspace_id)
        if outcome is SyncOutcome.CANVAS_STALE:
            return "⚠️ The channel canvas was removed. Mention me again to create a new one."
        return "❌ Sorry, I couldn't update the canvas. Please try again later."

    async def _status(self, workspace_id: str, channel_id: str) -> str:
        installation = self._directory.find(workspace_id)
        installations = self._directory.installations()
        state = self._store.get(workspace_id, channel_id)

        lines = [
            f"📊 *{self._config.app_name} Status*",
            "",
            f"*Team ID:* {workspace_id}",
            f"*Channel:* {channel_id}",
            "*Installation Status:* "
            + ("✅ Installed" if installation is not None else "❌ Not Found"),
            f"*Total Installations:* {len(installations)}",
        ]
        if state is not None:
            lines += [
                f"*Buffered Messages:* {len(state.messages)}",
                f"*Canvas:* {state.canvas_id or 'none yet'} ({state.canvas_status.value})",
                f"*History Imported:* {'yes' if state.bootstrapped else 'no'}",
            ]
        lines.append("")
        if installation is not None:
            lines.append("Ready to create summaries!")
        else:
            lines.append(self._install_required(workspace_id))
        return "\n".join(lines)

    def _help(self) -> str:
        name = self._config.app_name
        return (
            f"📄 Hi! I'm *{name}* - I create Canvas summaries of conversations.\n\n"
            "Mention me with:\n"
            f"• `@{name} summary` - Create manual summary\n"
            f"• `@{name} status` - Check installation status\n\n"
            "Or just have conversations and I'll keep the channel canvas up to date "
            "automatically!"
        )

    def _install_required(self, workspace_id: str) -> str:
        message = (
            f"❌ {self._config.app_name} is not installed for this workspace "
            f"({workspace_id})."
        )
        if self._install_url:
            message += f" Please install it at {self._install_url}"
        return message
