"""Order lifecycle service."""
import logging
from typing import List, Optional

from app.core.config import settings
from app.services.notifications.bus import NotificationBus
from app.services.notifications.topics import (
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER,
    OrderEvent,
)
from app.services.ordering.errors import (
    DishNotFound,
    InvalidPage,
    OrderAlreadyHasDriver,
    OrderError,
    OrderNotFound,
    RestaurantNotFound,
)
from app.services.ordering.models import (
    Caller,
    CreateOrderInput,
    CreateOrderOutput,
    EditOrderInput,
    EditOrderOutput,
    GetOrderOutput,
    GetOrdersInput,
    GetOrdersOutput,
    OrderSnapshot,
    TakeOrderInput,
    TakeOrderOutput,
)
from app.services.ordering.permissions import AccessControlGate, Operation
from app.services.ordering.pricing import parse_dish_options, price_item, price_order
from app.services.ordering.statuses import OrderStatus, UserRole
from app.services.persistence.orders import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    """Places orders, moves them along the status ladder and publishes the changes.

    Every public method returns a result envelope. Business-rule violations
    come back as ``ok=False`` with their message; unexpected failures are
    logged and reported with a generic message.
    """

    def __init__(
        self,
        repository: OrderRepository,
        bus: NotificationBus,
        gate: Optional[AccessControlGate] = None,
        page_size: Optional[int] = None,
    ):
        self.repository = repository
        self.bus = bus
        self.gate = gate or AccessControlGate()
        self.page_size = page_size or settings.orders_page_size

    async def create_order(
        self, caller: Optional[Caller], order_input: CreateOrderInput
    ) -> CreateOrderOutput:
        """
        Place an order for the caller.

        Prices every item from its dish and selected options, persists the
        order as Pending and notifies the restaurant owner.
        """
        try:
            customer = self.gate.authorize(caller, Operation.CREATE_ORDER)
            logger.info(
                f"[ORDERS] Create order - customer: {customer.id}, "
                f"restaurant: {order_input.restaurant_id}, items: {len(order_input.items)}"
            )

            restaurant = await self.repository.get_restaurant(order_input.restaurant_id)
            if restaurant is None:
                raise RestaurantNotFound()

            items = []
            contributions: List[float] = []
            for item in order_input.items:
                dish = await self.repository.get_dish(item.dish_id)
                if dish is None or dish.restaurant_id != restaurant.id:
                    raise DishNotFound()
                contributions.append(
                    price_item(dish.price, parse_dish_options(dish.options), item.options)
                )
                items.append((dish, item.options))

            total = price_order(contributions)
            order = await self.repository.create_order(customer.id, restaurant, items, total)
            snapshot = OrderSnapshot.from_order(order, owner_id=restaurant.owner_id)
            logger.info(f"[ORDERS] Order {order.id} created - total: {total:.2f}")

            await self.bus.publish(NEW_PENDING_ORDER, OrderEvent.for_owner(snapshot))
            return CreateOrderOutput(ok=True, order_id=order.id)

        except OrderError as e:
            logger.info(f"[ORDERS] Create order rejected - {e.message}")
            return CreateOrderOutput(ok=False, error=e.message)
        except Exception as e:
            logger.error(
                f"[ORDERS] Error creating order - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            await self._safe_rollback()
            return CreateOrderOutput(ok=False, error="Could not create order")

    async def get_orders(
        self, caller: Optional[Caller], orders_input: GetOrdersInput
    ) -> GetOrdersOutput:
        """List the caller's orders; what "the caller's" means depends on the role."""
        try:
            user = self.gate.authorize(caller, Operation.GET_ORDERS)
            if orders_input.page < 1:
                raise InvalidPage()
            status = orders_input.status

            if user.role == UserRole.OWNER:
                restaurants = await self.repository.find_restaurants_by_owner(
                    user.id, include_orders=True
                )
                orders = [
                    OrderSnapshot.from_order(order, owner_id=restaurant.owner_id)
                    for restaurant in restaurants
                    for order in restaurant.orders
                    if status is None or order.status == status.value
                ]
            else:
                party = (
                    {"customer_id": user.id}
                    if user.role == UserRole.CLIENT
                    else {"driver_id": user.id}
                )
                found = await self.repository.find_orders(
                    status=status,
                    take=self.page_size,
                    skip=(orders_input.page - 1) * self.page_size,
                    **party,
                )
                orders = [OrderSnapshot.from_order(order) for order in found]

            logger.debug(f"[ORDERS] Listed {len(orders)} orders for user {user.id} ({user.role})")
            return GetOrdersOutput(ok=True, orders=orders)

        except OrderError as e:
            return GetOrdersOutput(ok=False, error=e.message)
        except Exception as e:
            logger.error(
                f"[ORDERS] Error getting orders - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return GetOrdersOutput(ok=False, error="Could not get orders")

    async def get_order(self, caller: Optional[Caller], order_id: int) -> GetOrderOutput:
        """Return one order if the caller is its customer, driver or restaurant owner."""
        try:
            user = self.gate.authorize(caller, Operation.GET_ORDER)
            order = await self.repository.get_order(order_id, include_restaurant=True)
            if order is None:
                raise OrderNotFound()
            snapshot = OrderSnapshot.from_order(order)
            self.gate.check_visible(user, snapshot)
            return GetOrderOutput(ok=True, order=snapshot)

        except OrderError as e:
            return GetOrderOutput(ok=False, error=e.message)
        except Exception as e:
            logger.error(
                f"[ORDERS] Error loading order {order_id} - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return GetOrderOutput(ok=False, error="Could not load order")

    async def edit_order(
        self, caller: Optional[Caller], edit_input: EditOrderInput
    ) -> EditOrderOutput:
        """
        Move an order to its next status.

        Checks, in order: existence, visibility, the caller's role table and
        the status ladder. On success publishes NEW_COOKED_ORDER when the order
        becomes Cooked, and NEW_ORDER_UPDATE for every change.
        """
        try:
            user = self.gate.authorize(caller, Operation.EDIT_ORDER)
            order = await self.repository.get_order(edit_input.id, include_restaurant=True)
            if order is None:
                raise OrderNotFound()
            snapshot = OrderSnapshot.from_order(order)
            self.gate.check_visible(user, snapshot)
            self.gate.check_status_change(user, edit_input.status)
            self.gate.check_ladder(snapshot.status, edit_input.status)

            # No version check: concurrent edits resolve last-write-wins
            order = await self.repository.update_status(order, edit_input.status)
            updated = OrderSnapshot.from_order(order)
            logger.info(
                f"[ORDERS] Order {order.id} status changed: "
                f"{snapshot.status.value} -> {updated.status.value} by user {user.id}"
            )

            if updated.status == OrderStatus.COOKED:
                await self.bus.publish(NEW_COOKED_ORDER, OrderEvent.broadcast(updated))
            await self.bus.publish(NEW_ORDER_UPDATE, OrderEvent.for_parties(updated))
            return EditOrderOutput(ok=True)

        except OrderError as e:
            logger.info(f"[ORDERS] Edit order {edit_input.id} rejected - {e.message}")
            return EditOrderOutput(ok=False, error=e.message)
        except Exception as e:
            logger.error(
                f"[ORDERS] Error editing order {edit_input.id} - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            await self._safe_rollback()
            return EditOrderOutput(ok=False, error="Could not edit order")

    async def take_order(
        self, caller: Optional[Caller], take_input: TakeOrderInput
    ) -> TakeOrderOutput:
        """Assign the calling driver to an order. Re-taking one's own order is a no-op success."""
        try:
            driver = self.gate.authorize(caller, Operation.TAKE_ORDER)
            order = await self.repository.get_order(take_input.id, include_restaurant=True)
            if order is None:
                raise OrderNotFound()
            if order.driver_id is not None and order.driver_id != driver.id:
                raise OrderAlreadyHasDriver()

            if order.driver_id == driver.id:
                logger.info(f"[ORDERS] Order {order.id} already taken by driver {driver.id}")
                return TakeOrderOutput(ok=True)

            order = await self.repository.assign_driver(order, driver.id)
            logger.info(f"[ORDERS] Order {order.id} taken by driver {driver.id}")
            await self.bus.publish(
                NEW_ORDER_UPDATE, OrderEvent.for_parties(OrderSnapshot.from_order(order))
            )
            return TakeOrderOutput(ok=True)

        except OrderError as e:
            return TakeOrderOutput(ok=False, error=e.message)
        except Exception as e:
            logger.error(
                f"[ORDERS] Error taking order {take_input.id} - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            await self._safe_rollback()
            return TakeOrderOutput(ok=False, error="Could not update order")

    async def _safe_rollback(self) -> None:
        try:
            await self.repository.rollback()
        except Exception as e:
            logger.error(f"[ORDERS] Rollback failed - Error: {type(e).__name__}: {str(e)}")
