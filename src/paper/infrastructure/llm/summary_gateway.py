"""LLM-backed summary gateway."""

import logging

from paper.infrastructure.llm.client import LLMClient
from paper.infrastructure.llm.templates import create_jinja_env

logger = logging.getLogger(__name__)

# Characters of the summary sent to the title prompt
TITLE_CONTEXT_CHARS = 500
TITLE_MAX_WORDS = 6


class LLMSummaryGateway:
    """Generates summaries and titles with LiteLLM.

    The system prompt carries the output format and the participant name
    mapping; the transcript is sent as the user message.
    """

    def __init__(self, client: LLMClient, title_client: LLMClient | None = None) -> None:
        """Initialize the gateway.

        Args:
            client: Client used for summaries.
            title_client: Client used for titles (defaults to ``client``).
        """
        self._client = client
        self._title_client = title_client or client
        env = create_jinja_env()
        self._summary_template = env.get_template("summary_prompt.j2")
        self._title_template = env.get_template("title_prompt.j2")

    async def summarize(
        self,
        transcript: list[str],
        user_names: dict[str, str],
        message_count: int,
    ) -> str:
        """Summarize a transcript.

        Raises:
            LLMError: The completion failed.
        """
        system_prompt = self._summary_template.render(
            user_names=user_names,
            message_count=message_count,
            sampled_count=len(transcript),
        )
        logger.info(
            "Summarizing %d transcript lines (%d messages)",
            len(transcript),
            message_count,
        )
        response = await self._client.complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": "\n".join(transcript)},
            ]
        )
        return response.strip()

    async def generate_title(self, summary: str) -> str:
        """Generate a short title for a summary.

        Raises:
            LLMError: The completion failed.
        """
        prompt = self._title_template.render(summary=summary[:TITLE_CONTEXT_CHARS])
        response = await self._title_client.complete(
            [{"role": "user", "content": prompt}],
            max_tokens=20,
        )
        return clean_title(response)


def clean_title(raw: str) -> str:
    """Normalize a generated title.

    Strips whitespace, surrounding quotes and trailing periods, and cuts
    the title to ``TITLE_MAX_WORDS`` words.
    """
    title = raw.strip().splitlines()[0] if raw.strip() else ""
    title = title.strip().strip("\"'“”‘’").strip().rstrip(".")
    words = title.split()
    if len(words) > TITLE_MAX_WORDS:
        title = " ".join(words[:TITLE_MAX_WORDS])
    return title
