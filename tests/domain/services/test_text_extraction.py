"""Tests for link and date extraction."""

from paper.domain.services import extract_dates, extract_links


class TestExtractLinks:
    """Tests for extract_links."""

    def test_slack_formatted_links(self) -> None:
        """Slack's <url|label> format yields the URL only."""
        texts = ["see <https://example.com/doc|the doc> and <https://foo.dev>"]

        assert extract_links(texts) == ["https://example.com/doc", "https://foo.dev"]

    def test_bare_links(self) -> None:
        """Plain URLs are found too."""
        assert extract_links(["go to https://example.org/a?b=1 now"]) == [
            "https://example.org/a?b=1"
        ]

    def test_duplicates_removed_in_order(self) -> None:
        """Repeated links are listed once, at first appearance."""
        texts = ["<https://a.com>", "https://b.com", "<https://a.com|again>"]

        assert extract_links(texts) == ["https://a.com", "https://b.com"]

    def test_no_links(self) -> None:
        """Text without URLs yields nothing."""
        assert extract_links(["nothing here"]) == []


class TestExtractDates:
    """Tests for extract_dates."""

    def test_iso_and_month_names(self) -> None:
        """ISO dates and month-name dates are recognized."""
        texts = ["ship on 2024-03-01", "review March 5th, 2024"]

        assert extract_dates(texts) == ["2024-03-01", "March 5th, 2024"]

    def test_relative_dates(self) -> None:
        """Relative expressions are recognized case-insensitively."""
        assert extract_dates(["let's do it Tomorrow or next Friday"]) == [
            "Tomorrow",
            "next Friday",
        ]

    def test_dates_inside_links_are_ignored(self) -> None:
        """Digit groups inside URLs are not dates."""
        assert extract_dates(["<https://example.com/2024-01-01/post>"]) == []

    def test_duplicates_removed(self) -> None:
        """The same date mentioned twice is listed once."""
        assert extract_dates(["due 1/15", "yes 1/15"]) == ["1/15"]
