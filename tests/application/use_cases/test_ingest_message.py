"""Tests for IngestMessageUseCase."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from paper.application.services import ChannelStateStore
from paper.application.use_cases import IngestMessageUseCase
from paper.domain.entities import EventType, Message

from tests.helpers import FakeClock


@pytest.fixture
def store(clock: FakeClock) -> ChannelStateStore:
    """Channel state store."""
    return ChannelStateStore(clock=clock)


@pytest.fixture
def scheduler() -> MagicMock:
    """Mock batch scheduler."""
    scheduler = MagicMock()
    scheduler.on_message = AsyncMock(return_value=False)
    return scheduler


@pytest.fixture
def queue() -> MagicMock:
    """Mock event queue."""
    queue = MagicMock()
    queue.enqueue = AsyncMock()
    return queue


@pytest.fixture
def use_case(
    store: ChannelStateStore,
    scheduler: MagicMock,
    queue: MagicMock,
    directory: MagicMock,
) -> IngestMessageUseCase:
    """Use case under test."""
    return IngestMessageUseCase(store, scheduler, queue, directory)


class TestIngestMessageUseCase:
    """Tests for IngestMessageUseCase."""

    async def test_first_message_queues_bootstrap(
        self,
        use_case: IngestMessageUseCase,
        store: ChannelStateStore,
        queue: MagicMock,
        scheduler: MagicMock,
        make_message: Callable[..., Message],
    ) -> None:
        """A channel seen for the first time gets a BOOTSTRAP event."""
        message = make_message()

        assert await use_case.execute("T1", "C1", message) is True

        assert store.get("T1", "C1").messages == [message]
        event = queue.enqueue.await_args.args[0]
        assert event.type is EventType.BOOTSTRAP
        assert event.payload == {"workspace_id": "T1", "channel_id": "C1"}
        scheduler.on_message.assert_not_awaited()

    async def test_bootstrapped_channel_goes_through_scheduler(
        self,
        use_case: IngestMessageUseCase,
        store: ChannelStateStore,
        queue: MagicMock,
        scheduler: MagicMock,
        make_message: Callable[..., Message],
    ) -> None:
        """Later messages are evaluated against the batch thresholds."""
        state = store.get_or_create("T1", "C1")
        state.bootstrapped = True

        await use_case.execute("T1", "C1", make_message())

        scheduler.on_message.assert_awaited_once_with(state)
        queue.enqueue.assert_not_awaited()

    async def test_uninstalled_workspace_is_ignored(
        self,
        use_case: IngestMessageUseCase,
        store: ChannelStateStore,
        directory: MagicMock,
        queue: MagicMock,
        scheduler: MagicMock,
        make_message: Callable[..., Message],
    ) -> None:
        """Messages from unknown workspaces create no state and no work."""
        directory.is_installed.return_value = False

        assert await use_case.execute("T_UNKNOWN", "C1", make_message()) is False

        assert len(store) == 0
        queue.enqueue.assert_not_awaited()
        scheduler.on_message.assert_not_awaited()
        directory.resolve.assert_not_awaited()
