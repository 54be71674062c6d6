"""Slack integration."""

from paper.infrastructure.slack.client import SlackAppRunner, create_slack_app
from paper.infrastructure.slack.event_adapter import SlackEventAdapter
from paper.infrastructure.slack.workspace_client import (
    SlackWorkspaceClient,
    slack_error_code,
)
from paper.infrastructure.slack.workspace_directory import (
    InMemoryWorkspaceDirectory,
    StaticWorkspaceDirectory,
    create_workspace_client,
)

__all__ = [
    "InMemoryWorkspaceDirectory",
    "SlackAppRunner",
    "SlackEventAdapter",
    "SlackWorkspaceClient",
    "StaticWorkspaceDirectory",
    "create_slack_app",
    "create_workspace_client",
    "slack_error_code",
]
