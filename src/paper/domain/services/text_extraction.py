"""Link and date extraction from message text."""

import re

# Slack wraps links as <https://example.com|label> or <https://example.com>
SLACK_LINK_PATTERN = re.compile(r"<(https?://[^|>\s]+)(?:\|[^>]*)?>")
BARE_LINK_PATTERN = re.compile(r"(?<![<|])\bhttps?://[^\s<>|]+")

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
DATE_PATTERNS = (
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b"),
    re.compile(rf"\b{_MONTHS}\.? \d{{1,2}}(?:st|nd|rd|th)?(?:,? \d{{4}})?\b", re.I),
    re.compile(
        r"\b(?:today|tomorrow|next week|end of (?:day|week|month)|"
        r"(?:next |this )?(?:monday|tuesday|wednesday|thursday|friday))\b",
        re.I,
    ),
)


def _unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


def extract_links(texts: list[str]) -> list[str]:
    """Extract unique URLs in order of first appearance.

    Args:
        texts: Message texts.

    Returns:
        List of URLs.
    """
    links: list[str] = []
    for text in texts:
        links.extend(SLACK_LINK_PATTERN.findall(text))
        links.extend(BARE_LINK_PATTERN.findall(text))
    return _unique(links)


def extract_dates(texts: list[str]) -> list[str]:
    """Extract unique date expressions in order of first appearance.

    Args:
        texts: Message texts.

    Returns:
        List of matched date expressions.
    """
    dates: list[str] = []
    for text in texts:
        # Links often contain digit groups that look like dates
        text = SLACK_LINK_PATTERN.sub(" ", text)
        text = BARE_LINK_PATTERN.sub(" ", text)
        found: list[tuple[int, str]] = []
        for pattern in DATE_PATTERNS:
            found.extend((m.start(), m.group(0)) for m in pattern.finditer(text))
        dates.extend(value for _, value in sorted(found))
    return _unique(dates)
