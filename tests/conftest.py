"""Shared test fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from paper.domain.entities import Message

from tests.helpers import FakeClock


@pytest.fixture
def now() -> datetime:
    """Fixed start time for tests."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now: datetime) -> FakeClock:
    """Clock starting at ``now``."""
    return FakeClock(now)


@pytest.fixture
def make_message(now: datetime) -> Callable[..., Message]:
    """Factory for messages with increasing timestamps."""
    counter = 0

    def factory(text: str = "hello", user_id: str = "U001") -> Message:
        nonlocal counter
        counter += 1
        timestamp = now + timedelta(seconds=counter)
        return Message(
            ts=f"{timestamp.timestamp():.6f}",
            user_id=user_id,
            text=text,
            timestamp=timestamp,
        )

    return factory


@pytest.fixture
def workspace_client() -> MagicMock:
    """Mock workspace client with a channel that has no canvas yet."""
    client = MagicMock()
    client.post_message = AsyncMock()
    client.fetch_history = AsyncMock(return_value=[])
    client.get_channel_canvas_id = AsyncMock(return_value=None)
    client.create_canvas = AsyncMock(return_value="F_CANVAS_1")
    client.replace_canvas_body = AsyncMock()
    client.rename_canvas = AsyncMock()
    client.resolve_user_display_name = AsyncMock(
        side_effect=lambda user_id: f"Name {user_id}"
    )
    client.resolve_user_timezone = AsyncMock(return_value="Asia/Tokyo")
    return client


@pytest.fixture
def directory(workspace_client: MagicMock) -> MagicMock:
    """Mock workspace directory resolving every workspace to ``workspace_client``."""
    directory = MagicMock()
    directory.resolve = AsyncMock(return_value=workspace_client)
    directory.is_installed = AsyncMock(return_value=True)
    directory.find = MagicMock(return_value=None)
    directory.installations = MagicMock(return_value=[])
    directory.delete = MagicMock(return_value=True)
    return directory
