"""Slack event adapter."""

import re
from datetime import datetime, timezone
from typing import Any

from paper.domain.entities import Message


class SlackEventAdapter:
    """Convert Slack payloads to domain entities.

    Only human content messages are kept: anything with a subtype (joins,
    edits, deletions, bot posts), anything carrying a ``bot_id`` and
    messages without text are dropped.
    """

    MENTION_PATTERN = re.compile(r"<@([A-Z0-9]+)(?:\|[^>]*)?>")

    @staticmethod
    def is_content_message(event: dict[str, Any]) -> bool:
        """Check whether a message event carries human conversation content."""
        if event.get("subtype") or event.get("bot_id"):
            return False
        if not event.get("user"):
            return False
        return bool((event.get("text") or "").strip())

    @classmethod
    def to_message(cls, event: dict[str, Any]) -> Message | None:
        """Convert a Slack message payload to a Message entity.

        Args:
            event: Slack ``message`` event or history item.

        Returns:
            Message entity, or None if the payload is not content.
        """
        if not cls.is_content_message(event):
            return None

        ts = event["ts"]
        return Message(
            ts=ts,
            user_id=event["user"],
            text=event["text"],
            timestamp=datetime.fromtimestamp(float(ts), tz=timezone.utc),
            thread_ts=event.get("thread_ts"),
        )

    @classmethod
    def strip_mentions(cls, text: str) -> str:
        """Remove user mentions and surrounding whitespace from text."""
        return cls.MENTION_PATTERN.sub("", text).strip()

    @staticmethod
    def workspace_id(
        body: dict[str, Any] | None,
        event: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> str | None:
        """Find the workspace (team) ID of an incoming event.

        Looks at the Bolt context first, then the envelope, then the event.
        """
        for source, key in (
            (context, "team_id"),
            (body, "team_id"),
            (event, "team"),
            (event, "team_id"),
        ):
            if source and source.get(key):
                return str(source[key])
        if body:
            authorizations = body.get("authorizations") or []
            if authorizations and authorizations[0].get("team_id"):
                return str(authorizations[0]["team_id"])
        return None
