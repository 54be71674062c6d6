"""Application services."""

from paper.application.services.batch_scheduler import BatchScheduler
from paper.application.services.bootstrap_importer import BootstrapImporter
from paper.application.services.canvas_synchronizer import (
    CanvasSynchronizer,
    HistoryUnavailableError,
    MessageLoader,
    history_loader,
)
from paper.application.services.channel_state_store import ChannelStateStore
from paper.application.services.summary_service import SummaryService

__all__ = [
    "BatchScheduler",
    "BootstrapImporter",
    "CanvasSynchronizer",
    "ChannelStateStore",
    "HistoryUnavailableError",
    "MessageLoader",
    "SummaryService",
    "history_loader",
]
