"""
In-process publish/subscribe bus.

publish() never blocks the caller: events go onto an asyncio.Queue and a
single consumer task delivers them in publish order. Each subscriber is
awaited in registration order and isolated from the others, so one failure
is logged and counted but never stops delivery or reaches the publisher.
The subscriber table is fixed once start() has run.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from prometheus_client import Counter

from inventory_api.events.payloads import Event
from inventory_api.events.topics import Topic

logger = logging.getLogger(__name__)

Handler = Callable[[Event], Awaitable[None]]

EVENTS_PUBLISHED = Counter(
    "inventory_events_published_total", "Events accepted by the dispatcher", ["topic"]
)
EVENTS_DELIVERED = Counter(
    "inventory_events_delivered_total", "Successful subscriber invocations", ["topic"]
)
HANDLER_FAILURES = Counter(
    "inventory_event_handler_failures_total", "Subscriber invocations that raised", ["topic"]
)
EVENTS_DROPPED = Counter(
    "inventory_events_dropped_total", "Events published while the dispatcher was not running", ["topic"]
)


class EventDispatcher:
    """One instance per process, built at wiring time and injected where needed."""

    def __init__(self) -> None:
        self._subscribers: dict[Topic, list[Handler]] = defaultdict(list)
        self._queue: asyncio.Queue | None = None
        self._consumer: asyncio.Task | None = None
        self._started = False

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def subscribe(self, topic: Topic, handler: Handler) -> None:
        if self._started:
            raise RuntimeError("Subscribers must be registered before the dispatcher starts")
        self._subscribers[Topic(topic)].append(handler)

    def subscribers(self, topic: Topic) -> list[Handler]:
        return list(self._subscribers.get(Topic(topic), ()))

    def publish(self, event: Event) -> None:
        """
        Enqueue event for delivery. Topics nobody listens to are dropped, and so
        is anything published while no consumer is running.
        """
        topic = event.topic
        if not self._subscribers.get(topic):
            return
        if not self.running:
            EVENTS_DROPPED.labels(topic=topic.value).inc()
            logger.warning("Dispatcher not running, dropped %s event", topic.value)
            return
        self._queue.put_nowait(event)
        EVENTS_PUBLISHED.labels(topic=topic.value).inc()

    async def start(self) -> None:
        if self.running:
            return
        self._started = True
        self._queue = asyncio.Queue()
        self._consumer = asyncio.create_task(self._consume(), name="event-dispatcher")
        logger.info("Event dispatcher started with %d topics", len(self._subscribers))

    async def join(self) -> None:
        """Wait until every event published so far has been delivered."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Drain outstanding events, then stop the consumer."""
        if self._consumer is None:
            return
        if self.running:
            await self.join()
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
        self._consumer = None
        # A queue is bound to its event loop; the next start gets a fresh one
        self._queue = None
        logger.info("Event dispatcher stopped")

    async def _consume(self) -> None:
        assert self._queue is not None
        while True:
            event = await self._queue.get()
            try:
                await self._deliver(event)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: Event) -> None:
        topic = event.topic
        for handler in self._subscribers.get(topic, ()):
            try:
                await handler(event)
            except Exception:
                HANDLER_FAILURES.labels(topic=topic.value).inc()
                logger.exception("Subscriber %s failed for %s", getattr(handler, "__qualname__", handler), topic.value)
            else:
                EVENTS_DELIVERED.labels(topic=topic.value).inc()
