"""Tests for EventQueue."""

import asyncio

import pytest

from paper.domain.entities.event import Event, EventType
from paper.infrastructure.events.queue import EventQueue


def flush(channel_id: str = "C1") -> Event:
    return Event.for_channel(EventType.FLUSH, "T1", channel_id)


async def drain(queue: EventQueue) -> list[Event]:
    """Dequeue everything currently deliverable."""
    events: list[Event] = []
    try:
        while True:
            event = await asyncio.wait_for(queue.dequeue(), timeout=0.05)
            events.append(event)
            queue.mark_processing(event)
            queue.mark_done(event)
    except asyncio.TimeoutError:
        pass
    return events


class TestEventQueueBasic:
    """Basic tests for EventQueue."""

    @pytest.fixture
    def queue(self) -> EventQueue:
        """Create an EventQueue instance."""
        return EventQueue()

    async def test_enqueue_and_dequeue(self, queue: EventQueue) -> None:
        """Test basic enqueue and dequeue."""
        event = flush()
        await queue.enqueue(event)

        assert await queue.dequeue() is event

    async def test_dequeue_blocks_until_event_available(
        self, queue: EventQueue
    ) -> None:
        """Test that dequeue blocks until an event is available."""
        event = flush()

        async def enqueue_after_delay() -> None:
            await asyncio.sleep(0.05)
            await queue.enqueue(event)

        result, _ = await asyncio.gather(queue.dequeue(), enqueue_after_delay())

        assert result is event

    async def test_fifo_order_across_keys(self, queue: EventQueue) -> None:
        """Events with different keys keep their order."""
        for channel_id in ("C1", "C2", "C3"):
            await queue.enqueue(flush(channel_id))

        events = await drain(queue)

        assert [e.payload["channel_id"] for e in events] == ["C1", "C2", "C3"]

    async def test_clear(self, queue: EventQueue) -> None:
        """Cleared events are never delivered."""
        await queue.enqueue(flush("C1"))
        await queue.enqueue(flush("C2"), delay=0.01)
        queue.clear()
        await asyncio.sleep(0.02)

        assert await drain(queue) == []


class TestEventQueueSupersede:
    """Tests for per-key replacement."""

    @pytest.fixture
    def queue(self) -> EventQueue:
        """Create an EventQueue instance."""
        return EventQueue()

    async def test_newer_event_supersedes_queued_one(self, queue: EventQueue) -> None:
        """Only the latest event per key is delivered."""
        first = flush()
        second = flush()
        await queue.enqueue(first)
        await queue.enqueue(second)

        events = await drain(queue)

        assert len(events) == 1
        assert events[0] is second

    async def test_global_events_share_a_key(self, queue: EventQueue) -> None:
        await queue.enqueue(Event(type=EventType.CLEANUP, payload={}))
        await queue.enqueue(Event(type=EventType.CLEANUP, payload={}))
        await queue.enqueue(Event(type=EventType.STALE_SWEEP, payload={}))

        events = await drain(queue)

        assert [e.type for e in events] == [EventType.CLEANUP, EventType.STALE_SWEEP]

    async def test_processing_event_does_not_block_new_one(
        self, queue: EventQueue
    ) -> None:
        """A new event for a key can be queued while the old one runs."""
        first = flush()
        await queue.enqueue(first)
        event = await queue.dequeue()
        queue.mark_processing(event)

        second = flush()
        await queue.enqueue(second)
        assert await queue.dequeue() is second

        queue.mark_done(event)
        assert queue.is_scheduled(second.get_identity_key())


class TestEventQueueDelayed:
    """Tests for deferred enqueue."""

    @pytest.fixture
    def queue(self) -> EventQueue:
        """Create an EventQueue instance."""
        return EventQueue()

    async def test_delayed_event_is_delivered_after_delay(
        self, queue: EventQueue
    ) -> None:
        event = flush()
        await queue.enqueue(event, delay=0.2)

        assert queue.is_scheduled(event.get_identity_key())
        assert await drain(queue) == []

        await asyncio.sleep(0.2)
        assert await drain(queue) == [event]

    async def test_reenqueue_keeps_first_deadline(self, queue: EventQueue) -> None:
        """A newer deferred event replaces the waiting one on the old schedule."""
        first = flush()
        second = flush()
        await queue.enqueue(first, delay=0.2)
        await asyncio.sleep(0.1)
        await queue.enqueue(second, delay=0.4)
        await asyncio.sleep(0.15)

        assert await drain(queue) == [second]

    async def test_continuous_reenqueue_is_delivered(self, queue: EventQueue) -> None:
        """Re-enqueueing faster than the delay does not postpone delivery."""
        delivered: list[Event] = []

        async def consume() -> None:
            event = await queue.dequeue()
            queue.mark_processing(event)
            delivered.append(event)
            queue.mark_done(event)

        consumer = asyncio.create_task(consume())
        sent: list[Event] = []
        for _ in range(20):
            sent.append(flush())
            await queue.enqueue(sent[-1], delay=0.1)
            await asyncio.sleep(0.02)

        assert consumer.done()
        assert len(delivered) == 1
        assert delivered[0] in sent[:-1]
        queue.clear()

    async def test_deferred_after_delivery_starts_new_wait(
        self, queue: EventQueue
    ) -> None:
        first = flush()
        await queue.enqueue(first, delay=0.05)
        await asyncio.sleep(0.1)
        assert await drain(queue) == [first]

        second = flush()
        await queue.enqueue(second, delay=0.2)
        assert await drain(queue) == []

        await asyncio.sleep(0.2)
        assert await drain(queue) == [second]

    async def test_immediate_enqueue_cancels_deferred(self, queue: EventQueue) -> None:
        deferred = flush()
        immediate = flush()
        await queue.enqueue(deferred, delay=0.02)
        await queue.enqueue(immediate)
        await asyncio.sleep(0.04)

        assert await drain(queue) == [immediate]

    async def test_is_scheduled_false_after_done(self, queue: EventQueue) -> None:
        event = flush()
        await queue.enqueue(event)
        await drain(queue)

        assert not queue.is_scheduled(event.get_identity_key())

    async def test_immediate_enqueue_does_not_suspend(self, queue: EventQueue) -> None:
        """Replacing a deferred event completes without yielding to the loop."""
        await queue.enqueue(flush(), delay=1)
        immediate = flush()

        call = queue.enqueue(immediate)
        with pytest.raises(StopIteration):
            call.send(None)

        assert await drain(queue) == [immediate]

    async def test_cancelled_producer_stays_cancelled(self, queue: EventQueue) -> None:
        """Cancelling a task that replaces deferred events is not absorbed."""
        started = asyncio.Event()

        async def produce() -> None:
            while True:
                await queue.enqueue(flush(), delay=1)
                await queue.enqueue(flush())
                started.set()
                await asyncio.sleep(0)

        task = asyncio.create_task(produce())
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
        queue.clear()
