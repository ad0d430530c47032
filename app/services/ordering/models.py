"""Order models."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from app.services.ordering.statuses import OrderStatus, UserRole


class Caller(BaseModel):
    """Authenticated caller identity."""

    id: int
    role: UserRole


class DishChoice(BaseModel):
    """Choice within a dish option."""

    name: str
    extra: Optional[float] = None


class DishOption(BaseModel):
    """Customization option offered by a dish."""

    name: str
    extra: Optional[float] = None
    choices: List[DishChoice] = []


class OrderItemOption(BaseModel):
    """Option selected by the customer for an order item."""

    name: str
    choice: Optional[str] = None


class CreateOrderItemInput(BaseModel):
    """Item requested when placing an order."""

    dish_id: int
    options: List[OrderItemOption] = []


class CreateOrderInput(BaseModel):
    """Input for placing an order."""

    restaurant_id: int
    items: List[CreateOrderItemInput]


class GetOrdersInput(BaseModel):
    """Input for listing the caller's orders."""

    status: Optional[OrderStatus] = None
    page: int = 1


class EditOrderInput(BaseModel):
    """Input for changing an order's status."""

    id: int
    status: OrderStatus


class TakeOrderInput(BaseModel):
    """Input for a driver claiming an order."""

    id: int


class OrderItemSnapshot(BaseModel):
    """Persisted order item."""

    id: int
    dish_id: int
    options: List[OrderItemOption] = []

    model_config = ConfigDict(from_attributes=True)


class OrderSnapshot(BaseModel):
    """Immutable view of an order, detached from the database session."""

    id: int
    status: OrderStatus
    total: Optional[float] = None
    customer_id: Optional[int] = None
    driver_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    owner_id: Optional[int] = None
    items: List[OrderItemSnapshot] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_order(cls, order, owner_id: Optional[int] = None) -> "OrderSnapshot":
        """Build a snapshot from an Order row with restaurant and items loaded."""
        if owner_id is None and order.restaurant is not None:
            owner_id = order.restaurant.owner_id
        return cls(
            id=order.id,
            status=OrderStatus(order.status),
            total=order.total,
            customer_id=order.customer_id,
            driver_id=order.driver_id,
            restaurant_id=order.restaurant_id,
            owner_id=owner_id,
            items=[
                OrderItemSnapshot(id=item.id, dish_id=item.dish_id, options=item.options or [])
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def party_ids(self) -> set[int]:
        """Ids of the users related to this order."""
        return {
            user_id
            for user_id in (self.customer_id, self.driver_id, self.owner_id)
            if user_id is not None
        }


class CoreOutput(BaseModel):
    """Uniform result envelope."""

    ok: bool
    error: Optional[str] = None


class CreateOrderOutput(CoreOutput):
    order_id: Optional[int] = None


class GetOrderOutput(CoreOutput):
    order: Optional[OrderSnapshot] = None


class GetOrdersOutput(CoreOutput):
    orders: Optional[List[OrderSnapshot]] = None


class EditOrderOutput(CoreOutput):
    pass


class TakeOrderOutput(CoreOutput):
    pass
