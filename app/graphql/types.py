"""GraphQL types for the order API."""
from datetime import datetime
from typing import List, Optional

import strawberry

from app.services.ordering import models
from app.services.ordering.statuses import OrderStatus

OrderStatusType = strawberry.enum(OrderStatus, name="OrderStatus")


@strawberry.type(name="OrderItemOption")
class OrderItemOptionType:
    name: str
    choice: Optional[str] = None


@strawberry.type(name="OrderItem")
class OrderItemType:
    id: int
    dish_id: int
    options: List[OrderItemOptionType]


@strawberry.type(name="Order")
class OrderType:
    """An order as seen by its customer, driver or restaurant owner."""

    id: int
    status: OrderStatusType
    total: Optional[float]
    customer_id: Optional[int]
    driver_id: Optional[int]
    restaurant_id: Optional[int]
    owner_id: Optional[int]
    items: List[OrderItemType]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_snapshot(cls, order: models.OrderSnapshot) -> "OrderType":
        return cls(
            id=order.id,
            status=order.status,
            total=order.total,
            customer_id=order.customer_id,
            driver_id=order.driver_id,
            restaurant_id=order.restaurant_id,
            owner_id=order.owner_id,
            items=[
                OrderItemType(
                    id=item.id,
                    dish_id=item.dish_id,
                    options=[
                        OrderItemOptionType(name=option.name, choice=option.choice)
                        for option in item.options
                    ],
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


# Inputs


@strawberry.input(name="OrderItemOptionInput")
class OrderItemOptionInput:
    name: str
    choice: Optional[str] = None


@strawberry.input(name="CreateOrderItemInput")
class CreateOrderItemInput:
    dish_id: int
    options: List[OrderItemOptionInput] = strawberry.field(default_factory=list)


@strawberry.input(name="CreateOrderInput")
class CreateOrderInput:
    restaurant_id: int
    items: List[CreateOrderItemInput]

    def to_model(self) -> models.CreateOrderInput:
        return models.CreateOrderInput(
            restaurant_id=self.restaurant_id,
            items=[
                models.CreateOrderItemInput(
                    dish_id=item.dish_id,
                    options=[
                        models.OrderItemOption(name=option.name, choice=option.choice)
                        for option in item.options
                    ],
                )
                for item in self.items
            ],
        )


@strawberry.input(name="GetOrdersInput")
class GetOrdersInput:
    status: Optional[OrderStatusType] = None
    page: int = 1


@strawberry.input(name="GetOrderInput")
class GetOrderInput:
    id: int


@strawberry.input(name="EditOrderInput")
class EditOrderInput:
    id: int
    status: OrderStatusType


@strawberry.input(name="TakeOrderInput")
class TakeOrderInput:
    id: int


@strawberry.input(name="OrderUpdatesInput")
class OrderUpdatesInput:
    id: int


# Result envelopes


@strawberry.type(name="CreateOrderOutput")
class CreateOrderOutput:
    ok: bool
    error: Optional[str] = None
    order_id: Optional[int] = None


@strawberry.type(name="GetOrderOutput")
class GetOrderOutput:
    ok: bool
    error: Optional[str] = None
    order: Optional[OrderType] = None

    @classmethod
    def from_result(cls, result: models.GetOrderOutput) -> "GetOrderOutput":
        return cls(
            ok=result.ok,
            error=result.error,
            order=OrderType.from_snapshot(result.order) if result.order else None,
        )


@strawberry.type(name="GetOrdersOutput")
class GetOrdersOutput:
    ok: bool
    error: Optional[str] = None
    orders: Optional[List[OrderType]] = None

    @classmethod
    def from_result(cls, result: models.GetOrdersOutput) -> "GetOrdersOutput":
        return cls(
            ok=result.ok,
            error=result.error,
            orders=(
                [OrderType.from_snapshot(order) for order in result.orders]
                if result.orders is not None
                else None
            ),
        )


@strawberry.type(name="EditOrderOutput")
class EditOrderOutput:
    ok: bool
    error: Optional[str] = None


@strawberry.type(name="TakeOrderOutput")
class TakeOrderOutput:
    ok: bool
    error: Optional[str] = None
