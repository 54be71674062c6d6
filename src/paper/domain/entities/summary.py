"""Summary result entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SummaryResult:
    """Output of one summarization cycle, written into the canvas.

    Attributes:
        body: Canvas markdown, including footer.
        title: Canvas title.
        message_count: Number of messages the summary covers.
        timezone: IANA timezone used for the footer timestamp.
        links: URLs shared in the summarized messages.
        dates: Date expressions mentioned in the summarized messages.
        summary: Raw summary text returned by the gateway.
    """

    body: str
    title: str
    message_count: int
    timezone: str
    links: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    summary: str = ""
