"""Slack event handlers."""

import logging
from typing import Any

from slack_bolt.async_app import AsyncApp, AsyncBoltContext, AsyncSay

from paper.application.use_cases import (
    BotJoinedChannelUseCase,
    HandleMentionUseCase,
    IngestMessageUseCase,
    UninstallWorkspaceUseCase,
)
from paper.infrastructure.slack import SlackEventAdapter

logger = logging.getLogger(__name__)


def _mentions(text: str, user_id: str | None) -> bool:
    return bool(user_id) and f"<@{user_id}" in text


def register_handlers(
    app: AsyncApp,
    ingest_use_case: IngestMessageUseCase,
    mention_use_case: HandleMentionUseCase,
    bot_joined_use_case: BotJoinedChannelUseCase,
    uninstall_use_case: UninstallWorkspaceUseCase,
) -> None:
    """Register Slack event handlers.

    Args:
        app: AsyncApp instance.
        ingest_use_case: Buffers channel messages.
        mention_use_case: Answers commands addressed to the bot.
        bot_joined_use_case: Imports history when the bot joins a channel.
        uninstall_use_case: Forgets uninstalled workspaces.
    """

    @app.event("message")
    async def handle_message(
        event: dict[str, Any], body: dict[str, Any], context: AsyncBoltContext
    ) -> None:
        """Handle message events.

        Buffers human content messages. Messages addressed to the bot are
        commands and are handled by ``app_mention`` instead.
        """
        if not SlackEventAdapter.is_content_message(event):
            return
        if _mentions(event.get("text", ""), context.bot_user_id):
            return

        workspace_id = SlackEventAdapter.workspace_id(body, event, context)
        if workspace_id is None:
            logger.error("No team ID in message event %s", event.get("ts"))
            return

        message = SlackEventAdapter.to_message(event)
        if message is None:
            return

        try:
            await ingest_use_case.execute(workspace_id, event["channel"], message)
        except Exception:
            logger.exception("Error handling message event")

    @app.event("app_mention")
    async def handle_app_mention(
        event: dict[str, Any],
        body: dict[str, Any],
        context: AsyncBoltContext,
        say: AsyncSay,
    ) -> None:
        """Handle app_mention events."""
        workspace_id = SlackEventAdapter.workspace_id(body, event, context)
        if workspace_id is None:
            logger.error("No team ID in app_mention event %s", event.get("ts"))
            await say(
                "❌ Sorry, I couldn't identify your workspace. "
                "Please make sure the app is installed."
            )
            return

        text = SlackEventAdapter.strip_mentions(event.get("text", ""))
        try:
            await mention_use_case.execute(workspace_id, event["channel"], text, say)
        except Exception:
            logger.exception("Error handling app_mention event")

    @app.event("member_joined_channel")
    async def handle_member_joined(
        event: dict[str, Any], body: dict[str, Any], context: AsyncBoltContext
    ) -> None:
        """Handle member_joined_channel events for the bot itself."""
        if not context.bot_user_id or event.get("user") != context.bot_user_id:
            return

        workspace_id = SlackEventAdapter.workspace_id(body, event, context)
        if workspace_id is None:
            logger.error("No team ID in member_joined_channel event")
            return

        try:
            await bot_joined_use_case.execute(workspace_id, event["channel"])
        except Exception:
            logger.exception("Error handling member_joined_channel event")

    @app.event("app_uninstalled")
    async def handle_app_uninstalled(
        body: dict[str, Any], context: AsyncBoltContext
    ) -> None:
        """Handle app_uninstalled events."""
        await _uninstall(body, context, "app_uninstalled")

    @app.event("tokens_revoked")
    async def handle_tokens_revoked(
        event: dict[str, Any], body: dict[str, Any], context: AsyncBoltContext
    ) -> None:
        """Handle tokens_revoked events.

        Only revocation of bot tokens removes the workspace.
        """
        if not (event.get("tokens") or {}).get("bot"):
            return
        await _uninstall(body, context, "tokens_revoked")

    async def _uninstall(
        body: dict[str, Any], context: AsyncBoltContext, reason: str
    ) -> None:
        workspace_id = SlackEventAdapter.workspace_id(body, None, context)
        if workspace_id is None:
            logger.error("No team ID in %s event", reason)
            return
        logger.info("Workspace %s removed the app (%s)", workspace_id, reason)
        try:
            await uninstall_use_case.execute(workspace_id)
        except Exception:
            logger.exception("Error handling %s event", reason)
