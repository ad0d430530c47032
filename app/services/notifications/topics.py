"""Notification topics and event payloads."""
from typing import FrozenSet, Optional
from pydantic import BaseModel, ConfigDict

from app.services.ordering.models import OrderSnapshot

NEW_PENDING_ORDER = "NEW_PENDING_ORDER"  # Scoped to the restaurant owner
NEW_COOKED_ORDER = "NEW_COOKED_ORDER"  # Broadcast to drivers
NEW_ORDER_UPDATE = "NEW_ORDER_UPDATE"  # Scoped to the order's parties

TOPICS = (NEW_PENDING_ORDER, NEW_COOKED_ORDER, NEW_ORDER_UPDATE)


class OrderEvent(BaseModel):
    """Message published on the notification bus."""

    order: OrderSnapshot
    # User ids allowed to receive the event; None broadcasts to every subscriber
    audience: Optional[FrozenSet[int]] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_owner(cls, order: OrderSnapshot) -> "OrderEvent":
        audience = frozenset({order.owner_id}) if order.owner_id is not None else frozenset()
        return cls(order=order, audience=audience)

    @classmethod
    def for_parties(cls, order: OrderSnapshot) -> "OrderEvent":
        return cls(order=order, audience=frozenset(order.party_ids()))

    @classmethod
    def broadcast(cls, order: OrderSnapshot) -> "OrderEvent":
        return cls(order=order, audience=None)


class SubscriptionFilter(BaseModel):
    """Per-subscription delivery filter evaluated by the bus."""

    subscriber_id: Optional[int] = None
    order_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    def matches(self, event: OrderEvent) -> bool:
        if event.audience is not None and self.subscriber_id not in event.audience:
            return False
        if self.order_id is not None and event.order.id != self.order_id:
            return False
        return True
