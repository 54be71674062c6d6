"""Tests for BootstrapImporter."""

import asyncio
from collections.abc import Callable
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from paper.application.services import (
    BootstrapImporter,
    CanvasSynchronizer,
    ChannelStateStore,
)
from paper.config import BootstrapConfig, CanvasConfig
from paper.domain.entities import Message, SummaryResult, SyncOutcome
from paper.domain.exceptions import ChannelNotAccessibleError, PlatformError

from tests.helpers import FakeClock


@pytest.fixture
def store(clock: FakeClock) -> ChannelStateStore:
    """Channel state store."""
    return ChannelStateStore(clock=clock)


@pytest.fixture
def summary_service() -> MagicMock:
    """Mock summary service."""
    service = MagicMock()
    service.build = AsyncMock(
        side_effect=lambda client, messages: SummaryResult(
            body="body", title="📄 Title", message_count=len(messages), timezone="UTC"
        )
    )
    return service


@pytest.fixture
def importer(
    store: ChannelStateStore, directory: MagicMock, summary_service: MagicMock
) -> BootstrapImporter:
    """Importer with default settings (14 days, 1000 messages, min 10)."""
    synchronizer = CanvasSynchronizer(store, directory, summary_service, CanvasConfig())
    return BootstrapImporter(store, synchronizer, BootstrapConfig())


class TestBootstrapImporter:
    """Tests for BootstrapImporter.bootstrap."""

    async def test_imports_history_into_new_canvas(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
        clock: FakeClock,
        make_message: Callable[..., Message],
    ) -> None:
        """Enough history creates the canvas from the last 14 days."""
        workspace_client.fetch_history.return_value = [
            make_message(f"h{i}") for i in range(12)
        ]

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.CREATED
        assert result.message_count == 12
        workspace_client.fetch_history.assert_awaited_once_with(
            "C1", oldest=clock.current - timedelta(days=14), limit=1000
        )
        assert store.get("T1", "C1").bootstrapped is True

    async def test_sparse_history_creates_nothing(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
        make_message: Callable[..., Message],
    ) -> None:
        """Fewer than 10 messages leave the channel to regular batching."""
        workspace_client.fetch_history.return_value = [
            make_message() for _ in range(9)
        ]

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.INSUFFICIENT
        workspace_client.create_canvas.assert_not_awaited()
        assert store.get("T1", "C1").bootstrapped is True

    async def test_runs_only_once(
        self,
        importer: BootstrapImporter,
        workspace_client: MagicMock,
    ) -> None:
        """A second bootstrap of the same channel does nothing."""
        await importer.bootstrap("T1", "C1")

        assert await importer.bootstrap("T1", "C1") is None
        workspace_client.fetch_history.assert_awaited_once()

    async def test_history_failure_is_not_retried(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
    ) -> None:
        """A failed history fetch still marks the channel bootstrapped."""
        workspace_client.fetch_history.side_effect = PlatformError("missing_scope")

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.HISTORY_UNAVAILABLE
        assert store.get("T1", "C1").bootstrapped is True
        assert importer.needs_bootstrap("T1", "C1") is False

    async def test_history_timeout_is_reported(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
    ) -> None:
        """A timed-out history fetch ends the import instead of raising."""
        workspace_client.fetch_history.side_effect = asyncio.TimeoutError()

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.HISTORY_UNAVAILABLE
        state = store.get("T1", "C1")
        assert state.bootstrapped is True
        assert state.busy is False
        workspace_client.create_canvas.assert_not_awaited()

    async def test_inaccessible_channel_is_purged(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
    ) -> None:
        """Losing access during the import drops the channel."""
        workspace_client.fetch_history.side_effect = ChannelNotAccessibleError("C1")

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.CHANNEL_PURGED
        assert store.get("T1", "C1") is None

    async def test_busy_channel_stays_unbootstrapped(
        self,
        importer: BootstrapImporter,
        store: ChannelStateStore,
        workspace_client: MagicMock,
    ) -> None:
        """A busy channel is retried by the next trigger."""
        store.get_or_create("T1", "C1").try_acquire()

        result = await importer.bootstrap("T1", "C1")

        assert result is not None
        assert result.outcome is SyncOutcome.BUSY
        assert importer.needs_bootstrap("T1", "C1") is True
        workspace_client.fetch_history.assert_not_awaited()

    def test_needs_bootstrap_for_unknown_channel(
        self, importer: BootstrapImporter
    ) -> None:
        """Channels never seen need a bootstrap."""
        assert importer.needs_bootstrap("T1", "C_NEW") is True
