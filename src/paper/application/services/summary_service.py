"""Builds canvas-ready summaries from messages."""

import logging
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from paper.application.services.channel_state_store import Clock, utc_now
from paper.config import CanvasConfig
from paper.domain.entities import Message, SummaryResult
from paper.domain.services import (
    SummaryGateway,
    WorkspaceClient,
    extract_dates,
    extract_links,
    sample_messages,
)

logger = logging.getLogger(__name__)

ERROR_SUMMARY = "❌ Error generating summary. Please try again later."
DEFAULT_TITLE = "Conversation Summary"
TITLE_PREFIX = "📄 "
MAX_LISTED_ITEMS = 10


class SummaryService:
    """Wraps the summary gateway with everything around the LLM call.

    Bounds the number of forwarded messages, resolves participant names,
    substitutes a visible placeholder when the gateway fails, and renders
    the final canvas markdown.
    """

    def __init__(
        self,
        gateway: SummaryGateway,
        config: CanvasConfig,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            gateway: Summary/title generator.
            config: Canvas settings.
            clock: Time source for the footer.
        """
        self._gateway = gateway
        self._config = config
        self._clock = clock

    async def build(
        self, client: WorkspaceClient, messages: list[Message]
    ) -> SummaryResult:
        """Summarize messages into a canvas document.

        Gateway failures never raise; they produce a placeholder body so the
        canvas still shows that the update was attempted.

        Args:
            client: Workspace client used for user lookups.
            messages: Messages in chronological order.

        Returns:
            Summary result ready to publish.
        """
        selected = sample_messages(
            messages,
            max_messages=self._config.max_summary_messages,
            keep_first=self._config.keep_first,
            keep_last=self._config.keep_last,
        )
        if len(selected) < len(messages):
            logger.info(
                "Sampled %d of %d messages for summarization",
                len(selected),
                len(messages),
            )

        user_names, timezone_name = await self._resolve_participants(client, selected)
        transcript = [
            f"{user_names.get(msg.user_id, msg.user_id)}: {msg.text}"
            for msg in selected
        ]

        try:
            summary = await self._gateway.summarize(
                transcript, user_names, len(messages)
            )
        except Exception:
            logger.exception("Error generating summary")
            summary = ERROR_SUMMARY

        title = await self._generate_title(summary)

        texts = [msg.text for msg in messages]
        links = extract_links(texts)
        dates = extract_dates(texts)

        body = self._render_body(summary, links, dates, len(messages), timezone_name)
        return SummaryResult(
            body=body,
            title=title,
            message_count=len(messages),
            timezone=timezone_name,
            links=links,
            dates=dates,
            summary=summary,
        )

    async def _resolve_participants(
        self, client: WorkspaceClient, messages: list[Message]
    ) -> tuple[dict[str, str], str]:
        """Resolve display names and pick a timezone for the footer."""
        user_names: dict[str, str] = {}
        timezone_name: str | None = None
        for msg in messages:
            if msg.user_id in user_names:
                continue
            user_names[msg.user_id] = await client.resolve_user_display_name(
                msg.user_id
            )
            if timezone_name is None:
                timezone_name = await client.resolve_user_timezone(msg.user_id)
        return user_names, timezone_name or self._config.default_timezone

    async def _generate_title(self, summary: str) -> str:
        if summary == ERROR_SUMMARY:
            return TITLE_PREFIX + DEFAULT_TITLE
        try:
            title = (await self._gateway.generate_title(summary)).strip()
        except Exception:
            logger.exception("Error generating canvas title")
            title = ""
        return TITLE_PREFIX + (title or DEFAULT_TITLE)

    def _render_body(
        self,
        summary: str,
        links: list[str],
        dates: list[str],
        message_count: int,
        timezone_name: str,
    ) -> str:
        """Render the canvas markdown."""
        sections = [summary.strip()]

        if links:
            lines = "\n".join(f"- {link}" for link in links[:MAX_LISTED_ITEMS])
            sections.append(f"## 🔗 **Links Shared**\n{lines}")
        if dates:
            lines = "\n".join(f"- {date}" for date in dates[:MAX_LISTED_ITEMS])
            sections.append(f"## 📅 **Dates Mentioned**\n{lines}")

        footer = (
            f"---\n\n"
            f"*🤖 Auto-generated by {self._config.app_name} • "
            f"{self._format_time(timezone_name)}*\n"
            f"*📊 Summarized {message_count} messages*"
        )
        sections.append(footer)
        return "\n\n".join(sections)

    def _format_time(self, timezone_name: str) -> str:
        tz: tzinfo
        try:
            tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %s, using UTC", timezone_name)
            tz = timezone.utc
        return self._clock().astimezone(tz).strftime("%a, %b %d, %Y %I:%M %p %Z")
