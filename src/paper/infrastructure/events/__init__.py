"""Internal event system."""

from paper.infrastructure.events.dispatcher import EventDispatcher, event_handler
from paper.infrastructure.events.loop import EventLoop
from paper.infrastructure.events.queue import EventQueue
from paper.infrastructure.events.scheduler import EventScheduler

__all__ = [
    "EventDispatcher",
    "EventLoop",
    "EventQueue",
    "EventScheduler",
    "event_handler",
]
