"""Domain services."""

from paper.domain.services.message_sampler import sample_messages
from paper.domain.services.protocols import (
    SummaryGateway,
    WorkspaceClient,
    WorkspaceDirectory,
)
from paper.domain.services.text_extraction import extract_dates, extract_links

__all__ = [
    "SummaryGateway",
    "WorkspaceClient",
    "WorkspaceDirectory",
    "extract_dates",
    "extract_links",
    "sample_messages",
]
