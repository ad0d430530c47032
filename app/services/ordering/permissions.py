"""Access control for order lifecycle operations."""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from app.services.ordering.errors import AccessDenied, Forbidden, InvalidTransition
from app.services.ordering.models import Caller, OrderSnapshot
from app.services.ordering.statuses import OrderStatus, UserRole

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Operations exposed by the order lifecycle."""

    CREATE_ORDER = "create_order"
    GET_ORDER = "get_order"
    GET_ORDERS = "get_orders"
    EDIT_ORDER = "edit_order"
    TAKE_ORDER = "take_order"
    PENDING_ORDERS = "pending_orders"
    COOKED_ORDERS = "cooked_orders"
    ORDER_UPDATES = "order_updates"


ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)

OPERATION_ROLES: Dict[Operation, FrozenSet[UserRole]] = {
    Operation.CREATE_ORDER: frozenset({UserRole.CLIENT}),
    Operation.GET_ORDER: ANY_ROLE,
    Operation.GET_ORDERS: ANY_ROLE,
    Operation.EDIT_ORDER: ANY_ROLE,
    Operation.TAKE_ORDER: frozenset({UserRole.DELIVERY}),
    Operation.PENDING_ORDERS: frozenset({UserRole.OWNER}),
    Operation.COOKED_ORDERS: frozenset({UserRole.DELIVERY}),
    Operation.ORDER_UPDATES: ANY_ROLE,
}

ROLE_ALLOWED_STATUSES: Dict[UserRole, FrozenSet[OrderStatus]] = {
    UserRole.CLIENT: frozenset(),
    UserRole.OWNER: frozenset({OrderStatus.COOKING, OrderStatus.COOKED}),
    UserRole.DELIVERY: frozenset({OrderStatus.PICKED_UP, OrderStatus.DELIVERED}),
}


class AccessControlGate:
    """Decides whether a caller may run an operation on an order."""

    def authorize(self, caller: Optional[Caller], operation: Operation) -> Caller:
        """
        Check that the caller's role may invoke the operation.

        Returns:
            The caller, for chaining

        Raises:
            AccessDenied: No caller, or the role is not allowed
        """
        if caller is None or caller.role not in OPERATION_ROLES[operation]:
            logger.warning(
                f"[ACCESS] Denied {operation.value} - "
                f"caller: {caller.id if caller else 'anonymous'}, "
                f"role: {caller.role if caller else 'none'}"
            )
            raise AccessDenied()
        return caller

    @staticmethod
    def can_see_order(caller: Caller, order: OrderSnapshot) -> bool:
        """An order is visible to its customer, its driver and its restaurant's owner."""
        return caller.id in order.party_ids()

    def check_visible(self, caller: Caller, order: OrderSnapshot) -> None:
        if not self.can_see_order(caller, order):
            raise Forbidden()

    @staticmethod
    def check_status_change(caller: Caller, target: OrderStatus) -> None:
        """Raise InvalidTransition if the caller's role may not set the target status."""
        if target not in ROLE_ALLOWED_STATUSES[caller.role]:
            raise InvalidTransition(f"{caller.role.value} can't edit order status to {target.value}")

    @staticmethod
    def check_ladder(current: OrderStatus, target: OrderStatus) -> None:
        """Raise InvalidTransition unless target is the status right after current."""
        if current.next() != target:
            raise InvalidTransition(
                f"Order status can't change from {current.value} to {target.value}"
            )
