"""Order persistence service."""
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.db.models import Dish, Order, OrderItem, Restaurant
from app.services.ordering.models import OrderItemOption
from app.services.ordering.statuses import OrderStatus


class OrderRepository:
    """Repository for orders and the catalog rows they reference.

    Relations are only loaded through the explicit include flags; nothing
    here relies on lazy loading.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_restaurant(self, restaurant_id: int) -> Optional[Restaurant]:
        """Get restaurant by ID."""
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.id == restaurant_id)
        )
        return result.scalar_one_or_none()

    async def get_dish(self, dish_id: int) -> Optional[Dish]:
        """Get dish by ID."""
        result = await self.db.execute(select(Dish).where(Dish.id == dish_id))
        return result.scalar_one_or_none()

    async def create_order(
        self,
        customer_id: int,
        restaurant: Restaurant,
        items: List[tuple[Dish, List[OrderItemOption]]],
        total: float,
    ) -> Order:
        """Create an order and its items in one transaction."""
        order = Order(
            customer_id=customer_id,
            restaurant_id=restaurant.id,
            status=OrderStatus.PENDING.value,
            total=total,
            items=[
                OrderItem(
                    dish_id=dish.id,
                    options=[option.model_dump(exclude_none=True) for option in options],
                )
                for dish, options in items
            ],
        )
        self.db.add(order)
        await self.db.commit()
        return order

    async def get_order(
        self,
        order_id: int,
        include_restaurant: bool = True,
        include_items: bool = True,
    ) -> Optional[Order]:
        """Get order by ID with the requested relations."""
        query = select(Order).where(Order.id == order_id)
        if include_restaurant:
            query = query.options(selectinload(Order.restaurant))
        if include_items:
            query = query.options(selectinload(Order.items))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_orders(
        self,
        customer_id: Optional[int] = None,
        driver_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        take: int = 25,
        skip: int = 0,
    ) -> List[Order]:
        """Find orders by customer and/or driver, optionally by status, one page at a time."""
        query = select(Order).options(
            selectinload(Order.restaurant), selectinload(Order.items)
        )
        if customer_id is not None:
            query = query.where(Order.customer_id == customer_id)
        if driver_id is not None:
            query = query.where(Order.driver_id == driver_id)
        if status is not None:
            query = query.where(Order.status == status.value)
        result = await self.db.execute(query.order_by(Order.id).offset(skip).limit(take))
        return list(result.scalars().all())

    async def find_restaurants_by_owner(
        self, owner_id: int, include_orders: bool = False
    ) -> List[Restaurant]:
        """Find every restaurant owned by a user, with their orders if requested."""
        query = select(Restaurant).where(Restaurant.owner_id == owner_id)
        if include_orders:
            # Refresh collections already held by the session
            query = query.options(
                selectinload(Restaurant.orders).selectinload(Order.items)
            ).execution_options(populate_existing=True)
        result = await self.db.execute(query.order_by(Restaurant.id))
        return list(result.scalars().all())

    async def update_status(self, order: Order, status: OrderStatus) -> Order:
        """Persist a new order status."""
        order.status = status.value
        await self.db.commit()
        return order

    async def assign_driver(self, order: Order, driver_id: int) -> Order:
        """Persist the driver assigned to an order."""
        order.driver_id = driver_id
        await self.db.commit()
        return order

    async def rollback(self) -> None:
        await self.db.rollback()
