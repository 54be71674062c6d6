"""Bounding the number of messages forwarded to the summarizer."""

from typing import TypeVar

T = TypeVar("T")


def sample_messages(
    messages: list[T],
    max_messages: int,
    keep_first: int,
    keep_last: int,
) -> list[T]:
    """Reduce a message list to at most ``max_messages`` items.

    Keeps the earliest ``keep_first`` and the latest ``keep_last`` messages
    and fills the remaining budget with an evenly spaced sample of the middle.
    Order is preserved.

    Args:
        messages: Messages in chronological order.
        max_messages: Upper bound on the result size.
        keep_first: Number of leading messages always kept.
        keep_last: Number of trailing messages always kept.

    Returns:
        The selected messages in chronological order.
    """
    if max_messages <= 0:
        return []
    if len(messages) <= max_messages:
        return list(messages)

    # Head and tail never exceed the overall budget.
    keep_first = max(0, min(keep_first, max_messages))
    keep_last = max(0, min(keep_last, max_messages - keep_first))
    middle_budget = max_messages - keep_first - keep_last

    head = messages[:keep_first]
    tail = messages[len(messages) - keep_last :] if keep_last else []
    middle = messages[keep_first : len(messages) - keep_last]

    sampled: list[T] = []
    if middle_budget > 0 and middle:
        step = len(middle) / middle_budget
        sampled = [middle[int(i * step)] for i in range(middle_budget)]

    return head + sampled + tail
