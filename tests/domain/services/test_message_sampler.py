"""Tests for sample_messages."""

from paper.domain.services import sample_messages


class TestSampleMessages:
    """Tests for sample_messages."""

    def test_short_list_is_returned_unchanged(self) -> None:
        """Lists within the budget are kept whole."""
        messages = list(range(10))

        assert sample_messages(messages, 20, 5, 5) == messages

    def test_result_respects_budget(self) -> None:
        """The result never exceeds max_messages."""
        messages = list(range(1000))

        result = sample_messages(messages, 150, 25, 75)

        assert len(result) == 150

    def test_keeps_head_and_tail(self) -> None:
        """The first and last messages are always kept."""
        messages = list(range(1000))

        result = sample_messages(messages, 150, 25, 75)

        assert result[:25] == list(range(25))
        assert result[-75:] == list(range(925, 1000))

    def test_middle_is_sampled_in_order(self) -> None:
        """The middle sample is strictly increasing and from the middle range."""
        messages = list(range(1000))

        middle = sample_messages(messages, 150, 25, 75)[25:-75]

        assert len(middle) == 50
        assert middle == sorted(middle)
        assert len(set(middle)) == 50
        assert all(25 <= m < 925 for m in middle)

    def test_head_and_tail_larger_than_budget(self) -> None:
        """Oversized head/tail settings are clamped to the budget."""
        messages = list(range(100))

        result = sample_messages(messages, 10, 8, 8)

        assert result == list(range(8)) + [98, 99]

    def test_zero_budget(self) -> None:
        """A zero budget selects nothing."""
        assert sample_messages([1, 2, 3], 0, 1, 1) == []
