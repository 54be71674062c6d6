"""Slack implementation of the workspace capability handle."""

import asyncio
import logging
from collections.abc import Awaitable
from datetime import datetime
from typing import Any, TypeVar

from aiohttp import ClientError
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient
from slack_sdk.web.async_slack_response import AsyncSlackResponse

from paper.domain.entities import Message
from paper.domain.exceptions import (
    CanvasAlreadyExistsError,
    CanvasNotFoundError,
    CanvasPermissionError,
    ChannelNotAccessibleError,
    PaperError,
    PlatformError,
)
from paper.infrastructure.slack.event_adapter import SlackEventAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Error codes that indicate the channel is not accessible
_CHANNEL_NOT_ACCESSIBLE_ERRORS = frozenset(
    {
        "not_in_channel",
        "channel_not_found",
        "is_archived",
    }
)

_CANVAS_NOT_FOUND_ERRORS = frozenset(
    {
        "canvas_not_found",
        "canvas_deleted",
    }
)

_CANVAS_PERMISSION_ERRORS = frozenset(
    {
        "not_allowed_token_type",
        "missing_scope",
        "canvas_disabled_user_team",
        "restricted_action",
        "team_tier_cannot_create_channel_canvases",
        "not_authorized",
        "access_denied",
    }
)

_CANVAS_EXISTS_ERROR = "channel_canvas_already_exists"

_HISTORY_PAGE_SIZE = 200


def slack_error_code(error: SlackApiError) -> str:
    """Extract the ``error`` field of a failed Slack API response."""
    response = error.response
    if response is None:
        return ""
    try:
        return str(response.get("error", "") or "")
    except AttributeError:
        return ""


def _markdown(text: str) -> dict[str, str]:
    return {"type": "markdown", "markdown": text}


class SlackWorkspaceClient:
    """Capability handle for one Slack workspace.

    Wraps a bot-token ``AsyncWebClient`` and translates ``SlackApiError``
    codes into domain exceptions:

    - not_in_channel, channel_not_found, is_archived:
      ``ChannelNotAccessibleError``
    - canvas_not_found, canvas_deleted: ``CanvasNotFoundError``
    - channel_canvas_already_exists: ``CanvasAlreadyExistsError``
    - scope, token type and plan restrictions: ``CanvasPermissionError``
    - anything else, including transport errors: ``PlatformError``

    User names and timezones are cached for the lifetime of the client.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        """Initialize the client.

        Args:
            client: Slack AsyncWebClient authorized with a bot token.
        """
        self._client = client
        self._users: dict[str, dict[str, Any]] = {}

    @property
    def web_client(self) -> AsyncWebClient:
        """Underlying Slack web client."""
        return self._client

    async def _call(
        self,
        call: Awaitable[T],
        *,
        channel_id: str | None = None,
        canvas_id: str | None = None,
    ) -> T:
        """Await a Slack API call and map its failures to domain errors."""
        try:
            return await call
        except SlackApiError as e:
            code = slack_error_code(e)
            if channel_id and code in _CHANNEL_NOT_ACCESSIBLE_ERRORS:
                raise ChannelNotAccessibleError(
                    channel_id, f"Cannot access channel {channel_id}: {code}"
                ) from e
            if canvas_id and code in _CANVAS_NOT_FOUND_ERRORS:
                raise CanvasNotFoundError(
                    canvas_id, f"Canvas {canvas_id} is gone: {code}"
                ) from e
            if channel_id and code == _CANVAS_EXISTS_ERROR:
                raise CanvasAlreadyExistsError(channel_id) from e
            if code in _CANVAS_PERMISSION_ERRORS:
                raise CanvasPermissionError(f"Canvas operation not permitted: {code}") from e
            raise PlatformError(f"Slack API error: {code or e!s}") from e
        except ClientError as e:
            raise PlatformError(f"Slack API request failed: {e!s}") from e
        except asyncio.TimeoutError as e:
            raise PlatformError("Slack API request timed out") from e

    async def post_message(self, channel_id: str, text: str) -> None:
        """Post a plain message to a channel.

        Raises:
            ChannelNotAccessibleError: The bot cannot post to the channel.
            PlatformError: The API call failed for another reason.
        """
        await self._call(
            self._client.chat_postMessage(channel=channel_id, text=text),
            channel_id=channel_id,
        )

    async def fetch_history(
        self,
        channel_id: str,
        oldest: datetime | None = None,
        limit: int = 100,
    ) -> list[Message]:
        """Fetch recent content messages of a channel.

        Pages through ``conversations.history`` until ``limit`` content
        messages are collected or the history is exhausted.

        Args:
            channel_id: Channel ID.
            oldest: Only return messages after this time.
            limit: Maximum number of messages to return.

        Returns:
            The newest ``limit`` content messages, oldest first.
        """
        messages: list[Message] = []
        cursor: str | None = None
        params: dict[str, Any] = {"channel": channel_id}
        if oldest is not None:
            params["oldest"] = f"{oldest.timestamp():.6f}"

        while len(messages) < limit:
            response: AsyncSlackResponse = await self._call(
                self._client.conversations_history(
                    limit=min(_HISTORY_PAGE_SIZE, max(limit, 1)),
                    cursor=cursor,
                    **params,
                ),
                channel_id=channel_id,
            )
            for raw in response.get("messages", []):
                message = SlackEventAdapter.to_message(raw)
                if message is not None:
                    messages.append(message)

            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not response.get("has_more") or not cursor:
                break

        # API returns newest first
        messages = messages[:limit]
        messages.reverse()
        logger.debug("Fetched %d messages from %s", len(messages), channel_id)
        return messages

    async def get_channel_canvas_id(self, channel_id: str) -> str | None:
        """Return the ID of the canvas attached to the channel, if any."""
        response = await self._call(
            self._client.conversations_info(channel=channel_id),
            channel_id=channel_id,
        )
        channel = response.get("channel") or {}
        canvas = (channel.get("properties") or {}).get("canvas") or {}
        return canvas.get("document_id") or None

    async def create_canvas(self, channel_id: str, title: str, body: str) -> str:
        """Create the channel canvas.

        Returns:
            The new canvas ID.

        Raises:
            CanvasAlreadyExistsError: The channel already has a canvas.
            CanvasPermissionError: Canvases are not available.
        """
        response = await self._call(
            self._client.conversations_canvases_create(
                channel_id=channel_id,
                title=title,
                document_content=_markdown(body),
            ),
            channel_id=channel_id,
        )
        canvas_id = response.get("canvas_id")
        if not canvas_id:
            raise PlatformError(f"Canvas creation for {channel_id} returned no ID")
        return str(canvas_id)

    async def replace_canvas_body(self, canvas_id: str, body: str) -> None:
        """Replace the whole canvas content.

        Raises:
            CanvasNotFoundError: The canvas no longer exists.
        """
        await self._call(
            self._client.canvases_edit(
                canvas_id=canvas_id,
                changes=[{"operation": "replace", "document_content": _markdown(body)}],
            ),
            canvas_id=canvas_id,
        )

    async def rename_canvas(self, canvas_id: str, title: str) -> None:
        """Change the canvas title."""
        await self._call(
            self._client.canvases_edit(
                canvas_id=canvas_id,
                changes=[{"operation": "rename", "title_content": _markdown(title)}],
            ),
            canvas_id=canvas_id,
        )

    async def _user(self, user_id: str) -> dict[str, Any] | None:
        if user_id in self._users:
            return self._users[user_id]
        try:
            response = await self._call(self._client.users_info(user=user_id))
        except PaperError as e:
            logger.warning("Could not fetch user %s: %s", user_id, e)
            return None
        user = response.get("user") or {}
        self._users[user_id] = user
        return user

    async def resolve_user_display_name(self, user_id: str) -> str:
        """Return a human-readable name for a user.

        Falls back to a shortened ID when the lookup fails.
        """
        user = await self._user(user_id)
        if user:
            profile = user.get("profile") or {}
            name = (
                user.get("real_name")
                or profile.get("real_name")
                or profile.get("display_name")
                or user.get("name")
            )
            if name:
                return str(name)
        return f"User {user_id[:8]}"

    async def resolve_user_timezone(self, user_id: str) -> str | None:
        """Return the user's IANA timezone, if known."""
        user = await self._user(user_id)
        if not user:
            return None
        return user.get("tz") or None
