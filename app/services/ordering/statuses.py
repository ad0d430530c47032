"""Order status and user role enumerations."""
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Order lifecycle statuses, in ladder order."""

    PENDING = "Pending"  # Placed by the customer
    COOKING = "Cooking"  # Accepted by the restaurant
    COOKED = "Cooked"  # Ready for pickup
    PICKED_UP = "PickedUp"  # Collected by the driver
    DELIVERED = "Delivered"

    def __str__(self) -> str:
        """Return the string value of the status."""
        return self.value

    def next(self) -> Optional["OrderStatus"]:
        """Return the status that follows this one, or None at the end of the ladder."""
        ladder = list(OrderStatus)
        index = ladder.index(self)
        return ladder[index + 1] if index + 1 < len(ladder) else None


class UserRole(str, Enum):
    """Platform user roles."""

    CLIENT = "Client"
    OWNER = "Owner"
    DELIVERY = "Delivery"

    def __str__(self) -> str:
        """Return the string value of the role."""
        return self.value
