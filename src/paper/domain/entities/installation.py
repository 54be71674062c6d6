"""Workspace installation records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SingleWorkspaceInstallation:
    """Installation synthesized at startup from a static bot token.

    Attributes:
        bot_token: Bot token.
        installed_at: When the record was created.
    """

    bot_token: str
    installed_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class MultiWorkspaceInstallation:
    """Installation created by a successful OAuth code exchange.

    Attributes:
        workspace_id: Workspace (team) ID.
        workspace_name: Workspace display name.
        bot_token: Bot token issued for this workspace.
        bot_user_id: The bot's user ID in this workspace.
        scopes: Granted permission scopes.
        installed_at: When the workspace was installed.
    """

    workspace_id: str
    workspace_name: str
    bot_token: str
    bot_user_id: str | None = None
    scopes: tuple[str, ...] = ()
    installed_at: datetime = field(default_factory=_now)


Installation = SingleWorkspaceInstallation | MultiWorkspaceInstallation
