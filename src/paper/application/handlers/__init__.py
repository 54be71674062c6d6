"""Event handlers package."""

from paper.application.handlers.bootstrap_handler import BootstrapEventHandler
from paper.application.handlers.flush_handler import FlushEventHandler
from paper.application.handlers.maintenance_handlers import (
    CleanupEventHandler,
    StaleSweepEventHandler,
)

__all__ = [
    "BootstrapEventHandler",
    "CleanupEventHandler",
    "FlushEventHandler",
    "StaleSweepEventHandler",
]
