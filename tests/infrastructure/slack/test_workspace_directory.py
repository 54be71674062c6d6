"""Tests for the workspace directories."""

import logging
from unittest.mock import MagicMock

import pytest

from paper.domain.entities import (
    MultiWorkspaceInstallation,
    SingleWorkspaceInstallation,
)
from paper.domain.exceptions import WorkspaceNotInstalledError
from paper.infrastructure.slack import (
    InMemoryWorkspaceDirectory,
    StaticWorkspaceDirectory,
)

logger = logging.getLogger(__name__)


@pytest.fixture
def client_factory() -> MagicMock:
    """Factory returning a distinct mock client per call."""
    return MagicMock(side_effect=lambda token: MagicMock(name=f"client-{token}"))


def installation(workspace_id: str = "T1", token: str = "xoxb-1") -> MultiWorkspaceInstallation:
    return MultiWorkspaceInstallation(
        workspace_id=workspace_id,
        workspace_name="Acme",
        bot_token=token,
        bot_user_id="UBOT",
        scopes=("chat:write", "canvases:write"),
    )


class TestStaticWorkspaceDirectory:
    """StaticWorkspaceDirectory tests."""

    async def test_resolves_every_workspace_to_one_client(
        self, client_factory: MagicMock
    ) -> None:
        directory = StaticWorkspaceDirectory(
            SingleWorkspaceInstallation(bot_token="xoxb-static"), client_factory
        )

        first = await directory.resolve("T1")
        second = await directory.resolve("T2")

        assert first is second
        client_factory.assert_called_once_with("xoxb-static")
        assert await directory.is_installed("T_ANY")

    def test_delete_keeps_installation(self, client_factory: MagicMock) -> None:
        static = SingleWorkspaceInstallation(bot_token="xoxb-static")
        directory = StaticWorkspaceDirectory(static, client_factory)

        assert directory.delete("T1") is False
        assert directory.find("T1") is static
        assert directory.installations() == [static]


class TestInMemoryWorkspaceDirectory:
    """InMemoryWorkspaceDirectory tests."""

    @pytest.fixture
    def directory(self, client_factory: MagicMock) -> InMemoryWorkspaceDirectory:
        return InMemoryWorkspaceDirectory(client_factory)

    async def test_unknown_workspace(self, directory: InMemoryWorkspaceDirectory) -> None:
        assert not await directory.is_installed("T1")
        assert directory.find("T1") is None
        with pytest.raises(WorkspaceNotInstalledError) as exc_info:
            await directory.resolve("T1")
        assert exc_info.value.workspace_id == "T1"

    async def test_resolve_caches_client(
        self, directory: InMemoryWorkspaceDirectory, client_factory: MagicMock
    ) -> None:
        directory.save(installation())

        first = await directory.resolve("T1")
        second = await directory.resolve("T1")

        assert first is second
        client_factory.assert_called_once_with("xoxb-1")

    async def test_reinstall_replaces_client(
        self, directory: InMemoryWorkspaceDirectory, client_factory: MagicMock
    ) -> None:
        directory.save(installation(token="xoxb-old"))
        old = await directory.resolve("T1")

        directory.save(installation(token="xoxb-new"))
        new = await directory.resolve("T1")

        assert old is not new
        assert client_factory.call_args_list[-1].args == ("xoxb-new",)
        assert len(directory.installations()) == 1

    async def test_delete(self, directory: InMemoryWorkspaceDirectory) -> None:
        directory.save(installation())

        assert directory.delete("T1") is True
        assert directory.delete("T1") is False
        assert not await directory.is_installed("T1")

    async def test_workspaces_are_isolated(
        self, directory: InMemoryWorkspaceDirectory
    ) -> None:
        directory.save(installation("T1", "xoxb-1"))
        directory.save(installation("T2", "xoxb-2"))

        assert await directory.resolve("T1") is not await directory.resolve("T2")
        directory.delete("T1")
        assert await directory.is_installed("T2")

    async def test_authorize_installed_team(
        self, directory: InMemoryWorkspaceDirectory
    ) -> None:
        directory.save(installation())

        result = await directory.authorize(None, "T1", logger)

        assert result is not None
        assert result.bot_token == "xoxb-1"
        assert result.bot_user_id == "UBOT"
        assert result.team_id == "T1"

    async def test_authorize_unknown_team(
        self, directory: InMemoryWorkspaceDirectory
    ) -> None:
        assert await directory.authorize(None, "T9", logger) is None
        assert await directory.authorize(None, None, logger) is None
