"""GraphQL context for dependency injection.

Resolvers reach the caller, the notification bus and the order service
through ``info.context``.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from app.services.notifications.bus import NotificationBus
from app.services.ordering.models import Caller
from app.services.ordering.permissions import AccessControlGate
from app.services.ordering.service import OrderService
from app.services.persistence.orders import OrderRepository


class GraphQLContext(BaseContext):
    """Per-request GraphQL context.

    Attributes:
        db: Database session for this request (or websocket connection)
        bus: Process-wide notification bus
        caller: Resolved caller identity, None when anonymous
        gate: Access control gate shared by resolvers and the order service
        order_service: Order lifecycle service bound to this session
    """

    def __init__(
        self,
        db: AsyncSession,
        bus: NotificationBus,
        caller: Optional[Caller] = None,
    ) -> None:
        super().__init__()
        self.db = db
        self.bus = bus
        self.caller = caller
        self.gate = AccessControlGate()
        self.order_service = OrderService(
            repository=OrderRepository(db),
            bus=bus,
            gate=self.gate,
        )
