"""
In-process publish/subscribe bus for catalog change notifications.

The bus is constructed explicitly (once per application, in the lifespan)
and handed to resolvers through the GraphQL context. Each subscriber owns
a bounded queue; when a slow subscriber's queue is full the oldest pending
event is discarded to make room for the new one.

Example:
    ```python
    bus = NotificationBus(max_queue_size=10)

    async with bus.subscribe(BOOK_ADDED) as subscription:
        await bus.publish(BOOK_ADDED, event)
        async for received in subscription:
            ...

    bus.close()
    ```
"""

import asyncio
from typing import Any

from catalog.logging import logger
from catalog.utils.metrics import MetricsCollector

# Marks the end of a subscription's stream
_CLOSED = object()


class Subscription:
    """
    A live registration on one topic of a NotificationBus.

    Registration happens on construction, so every event published after
    `NotificationBus.subscribe` returns is delivered, even before iteration
    starts. Iterating yields events in publish order and ends once the
    subscription or the bus is closed.
    """

    def __init__(self, bus: "NotificationBus", topic: str) -> None:
        self.topic = topic
        self.closed = False
        self._bus = bus
        self._queue: asyncio.Queue[Any] = asyncio.Queue(
            maxsize=bus.max_queue_size
        )

    def deliver(self, event: Any) -> bool:
        """
        Enqueue an event without blocking the publisher.

        Args:
            event: The published payload.

        Returns:
            True if the oldest pending event was dropped to make room.
        """
        dropped = False
        if self._queue.full():
            self._queue.get_nowait()
            dropped = True

        self._queue.put_nowait(event)
        return dropped

    def close(self) -> None:
        """
        Deregister from the bus and end iteration.

        Events queued before closing are still yielded. Calling it again
        has no effect.
        """
        if self.closed:
            return

        self.closed = True
        self._bus.unsubscribe(self)
        self.deliver(_CLOSED)

    async def aclose(self) -> None:
        self.close()

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Any:
        event = await self._queue.get()
        if event is _CLOSED:
            # Keep the marker so further calls stop too
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()


class NotificationBus:
    """
    Topic keyed fan-out of events to live subscribers.

    Nothing is persisted or replayed: a subscriber only sees events
    published while it is registered.

    Attributes:
        max_queue_size: Capacity of each subscriber's pending queue.
        subscriptions: Live subscriptions grouped by topic.
    """

    def __init__(self, max_queue_size: int = 100) -> None:
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")

        self.max_queue_size = max_queue_size
        self.subscriptions: dict[str, set[Subscription]] = {}
        self.closed = False

    def subscribe(self, topic: str) -> Subscription:
        """
        Register a new subscriber on a topic.

        Args:
            topic: Topic name, e.g. BOOK_ADDED.

        Returns:
            The registered subscription.

        Raises:
            RuntimeError: If the bus has been closed.
        """
        if self.closed:
            raise RuntimeError("Notification bus is closed")

        subscription = Subscription(self, topic)
        self.subscriptions.setdefault(topic, set()).add(subscription)
        MetricsCollector.record_subscription_opened(topic)
        logger.debug(
            f"Subscription ({id(subscription)}) registered on topic {topic}"
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """
        Remove a subscription from its topic.

        Args:
            subscription: The subscription to remove.
        """
        subscribers = self.subscriptions.get(subscription.topic)
        if not subscribers or subscription not in subscribers:
            return

        subscribers.discard(subscription)
        if not subscribers:
            del self.subscriptions[subscription.topic]

        MetricsCollector.record_subscription_closed(subscription.topic)
        logger.debug(
            f"Subscription ({id(subscription)}) removed from topic "
            f"{subscription.topic}"
        )

    def subscriber_count(self, topic: str) -> int:
        """Return the number of live subscriptions on a topic."""
        return len(self.subscriptions.get(topic, ()))

    async def publish(self, topic: str, event: Any) -> int:
        """
        Deliver an event to every current subscriber of a topic.

        Args:
            topic: Topic name.
            event: Payload handed to subscribers as is.

        Returns:
            Number of subscribers the event was delivered to.
        """
        # Snapshot so subscribers closing meanwhile don't break iteration
        subscribers = list(self.subscriptions.get(topic, ()))

        for subscription in subscribers:
            if subscription.deliver(event):
                MetricsCollector.record_notification_dropped(topic)
                logger.warning(
                    f"Subscriber ({id(subscription)}) on topic {topic} is "
                    f"lagging, dropped its oldest pending event"
                )

        MetricsCollector.record_notification_published(topic)
        logger.debug(
            f"Published {topic} event to {len(subscribers)} subscriber(s)"
        )
        return len(subscribers)

    def close(self) -> None:
        """End every live subscription and refuse new ones."""
        self.closed = True
        for subscribers in list(self.subscriptions.values()):
            for subscription in list(subscribers):
                subscription.close()

        logger.info("Notification bus closed")
