"""In-process notification bus.

Topic-keyed publish/subscribe used to push order events to GraphQL
subscribers. Each subscription owns a bounded queue and a filter; the bus
evaluates the filter on publish and only enqueues matching events.
"""
import asyncio
import itertools
import logging
from typing import AsyncIterator, Dict, Optional

from app.core.config import settings
from app.services.notifications.topics import OrderEvent, SubscriptionFilter

logger = logging.getLogger(__name__)

_subscription_ids = itertools.count(1)
# Queued by close() to wake a waiting consumer
_CLOSED = object()


class Subscription:
    """A single subscriber's slot on a topic."""

    def __init__(self, topic: str, event_filter: SubscriptionFilter, max_queue: int):
        self.id = next(_subscription_ids)
        self.topic = topic
        self.filter = event_filter
        self.queue: asyncio.Queue[OrderEvent] = asyncio.Queue(maxsize=max_queue)
        self.closed = False

    def close(self) -> None:
        """Stop iteration, waking a consumer blocked on the queue."""
        if self.closed:
            return
        self.closed = True
        # Pending events are dropped once closed, so make room for the marker
        while self.queue.full():
            self.queue.get_nowait()
        self.queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> OrderEvent:
        if self.closed:
            raise StopAsyncIteration
        event = await self.queue.get()
        if event is _CLOSED:
            raise StopAsyncIteration
        return event


class NotificationBus:
    """
    In-memory topic bus.

    Publishing is fire-and-forget: filter errors and full queues are logged
    and skipped, never raised to the publisher.

    Example:
        >>> bus = NotificationBus()
        >>> async for event in bus.listen(NEW_ORDER_UPDATE, SubscriptionFilter(subscriber_id=1, order_id=7)):
        ...     print(event.order.status)
    """

    def __init__(self, max_queue: int = 100):
        self.max_queue = max_queue
        self._subscriptions: Dict[str, Dict[int, Subscription]] = {}

    def subscribe(
        self, topic: str, event_filter: Optional[SubscriptionFilter] = None
    ) -> Subscription:
        """Register a subscription on a topic."""
        subscription = Subscription(topic, event_filter or SubscriptionFilter(), self.max_queue)
        self._subscriptions.setdefault(topic, {})[subscription.id] = subscription
        logger.debug(
            f"[BUS] Subscribed #{subscription.id} to {topic} - "
            f"subscriber: {subscription.filter.subscriber_id}, order: {subscription.filter.order_id}"
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns False if it was already gone."""
        subscription.close()
        removed = self._subscriptions.get(subscription.topic, {}).pop(subscription.id, None)
        if removed is not None:
            logger.debug(f"[BUS] Unsubscribed #{subscription.id} from {subscription.topic}")
        return removed is not None

    async def publish(self, topic: str, event: OrderEvent) -> None:
        """Deliver an event to every matching subscriber of the topic."""
        subscriptions = list(self._subscriptions.get(topic, {}).values())
        delivered = 0
        for subscription in subscriptions:
            try:
                if not subscription.filter.matches(event):
                    continue
                subscription.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    f"[BUS] Queue full, dropping {topic} event for order {event.order.id} "
                    f"on subscription #{subscription.id}"
                )
            except Exception as e:
                logger.error(
                    f"[BUS] Error delivering {topic} event on subscription #{subscription.id} - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
        logger.info(
            f"[BUS] Published {topic} for order {event.order.id} - "
            f"{delivered}/{len(subscriptions)} subscribers matched"
        )

    async def listen(
        self, topic: str, event_filter: Optional[SubscriptionFilter] = None
    ) -> AsyncIterator[OrderEvent]:
        """Yield matching events until the consumer stops iterating."""
        subscription = self.subscribe(topic, event_filter)
        try:
            async for event in subscription:
                yield event
        finally:
            self.unsubscribe(subscription)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, {}))

    def clear(self) -> None:
        """Drop every subscription."""
        for subscriptions in self._subscriptions.values():
            for subscription in subscriptions.values():
                subscription.close()
        self._subscriptions.clear()


_bus: Optional[NotificationBus] = None


def get_notification_bus() -> NotificationBus:
    """Return the process-wide notification bus."""
    global _bus
    if _bus is None:
        _bus = NotificationBus(max_queue=settings.bus_queue_size)
    return _bus
