"""GraphQL schema: order queries, mutations and subscriptions."""
import logging
from typing import AsyncGenerator

import strawberry
from strawberry.types import Info

from app.graphql.types import (
    CreateOrderInput,
    CreateOrderOutput,
    EditOrderInput,
    EditOrderOutput,
    GetOrderInput,
    GetOrderOutput,
    GetOrdersInput,
    GetOrdersOutput,
    OrderType,
    OrderUpdatesInput,
    TakeOrderInput,
    TakeOrderOutput,
)
from app.services.notifications.topics import (
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER,
    SubscriptionFilter,
)
from app.services.ordering import models
from app.services.ordering.permissions import Operation

logger = logging.getLogger(__name__)


@strawberry.type
class Query:
    @strawberry.field(description="Orders of the caller, by role")
    async def get_orders(self, info: Info, input: GetOrdersInput) -> GetOrdersOutput:
        result = await info.context.order_service.get_orders(
            info.context.caller,
            models.GetOrdersInput(status=input.status, page=input.page),
        )
        return GetOrdersOutput.from_result(result)

    @strawberry.field(description="One order visible to the caller")
    async def get_order(self, info: Info, input: GetOrderInput) -> GetOrderOutput:
        result = await info.context.order_service.get_order(info.context.caller, input.id)
        return GetOrderOutput.from_result(result)


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Place an order (clients only)")
    async def create_order(self, info: Info, input: CreateOrderInput) -> CreateOrderOutput:
        result = await info.context.order_service.create_order(
            info.context.caller, input.to_model()
        )
        return CreateOrderOutput(ok=result.ok, error=result.error, order_id=result.order_id)

    @strawberry.mutation(description="Move an order to its next status")
    async def edit_order(self, info: Info, input: EditOrderInput) -> EditOrderOutput:
        result = await info.context.order_service.edit_order(
            info.context.caller, models.EditOrderInput(id=input.id, status=input.status)
        )
        return EditOrderOutput(ok=result.ok, error=result.error)

    @strawberry.mutation(description="Claim an order as its driver (drivers only)")
    async def take_order(self, info: Info, input: TakeOrderInput) -> TakeOrderOutput:
        result = await info.context.order_service.take_order(
            info.context.caller, models.TakeOrderInput(id=input.id)
        )
        return TakeOrderOutput(ok=result.ok, error=result.error)


@strawberry.type
class Subscription:
    @strawberry.subscription(description="New orders for the caller's restaurants")
    async def pending_orders(self, info: Info) -> AsyncGenerator[OrderType, None]:
        owner = info.context.gate.authorize(info.context.caller, Operation.PENDING_ORDERS)
        logger.info(f"[GRAPHQL] Owner {owner.id} subscribed to pending orders")
        async for event in info.context.bus.listen(
            NEW_PENDING_ORDER, SubscriptionFilter(subscriber_id=owner.id)
        ):
            yield OrderType.from_snapshot(event.order)

    @strawberry.subscription(description="Orders ready for pickup")
    async def cooked_orders(self, info: Info) -> AsyncGenerator[OrderType, None]:
        driver = info.context.gate.authorize(info.context.caller, Operation.COOKED_ORDERS)
        logger.info(f"[GRAPHQL] Driver {driver.id} subscribed to cooked orders")
        async for event in info.context.bus.listen(
            NEW_COOKED_ORDER, SubscriptionFilter(subscriber_id=driver.id)
        ):
            yield OrderType.from_snapshot(event.order)

    @strawberry.subscription(description="Status changes of one order the caller is part of")
    async def order_updates(
        self, info: Info, input: OrderUpdatesInput
    ) -> AsyncGenerator[OrderType, None]:
        user = info.context.gate.authorize(info.context.caller, Operation.ORDER_UPDATES)
        logger.info(f"[GRAPHQL] User {user.id} subscribed to updates of order {input.id}")
        async for event in info.context.bus.listen(
            NEW_ORDER_UPDATE, SubscriptionFilter(subscriber_id=user.id, order_id=input.id)
        ):
            yield OrderType.from_snapshot(event.order)


schema = strawberry.Schema(query=Query, mutation=Mutation, subscription=Subscription)
