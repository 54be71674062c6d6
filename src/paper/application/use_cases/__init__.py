"""Use cases."""

from paper.application.use_cases.bot_joined_channel import BotJoinedChannelUseCase
from paper.application.use_cases.handle_mention import (
    HandleMentionUseCase,
    MentionCommand,
    parse_command,
)
from paper.application.use_cases.ingest_message import IngestMessageUseCase
from paper.application.use_cases.uninstall_workspace import UninstallWorkspaceUseCase

__all__ = [
    "BotJoinedChannelUseCase",
    "HandleMentionUseCase",
    "IngestMessageUseCase",
    "MentionCommand",
    "UninstallWorkspaceUseCase",
    "parse_command",
]
