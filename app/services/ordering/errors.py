"""Order domain errors.

Every error carries the user-facing message returned in the result envelope.
"""


class OrderError(Exception):
    """Base class for business-rule violations in the order lifecycle."""

    message = "Order error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class RestaurantNotFound(OrderError):
    message = "Restaurant not found."


class DishNotFound(OrderError):
    message = "Dish not found."


class OrderNotFound(OrderError):
    message = "Order not found"


class OptionNotFound(OrderError):
    def __init__(self, option_name: str):
        super().__init__(f"Dish option {option_name} not found.")
        self.option_name = option_name


class ChoiceNotFound(OrderError):
    def __init__(self, choice_name: str):
        super().__init__(f"Dish option choice {choice_name} not found.")
        self.choice_name = choice_name


class Forbidden(OrderError):
    """Caller is not the customer, driver or restaurant owner of the order."""

    message = "You can't see other peoples' orders"


class AccessDenied(OrderError):
    """Caller's role may not invoke the operation at all."""

    message = "Forbidden resource"


class InvalidTransition(OrderError):
    """Status change not allowed for the caller's role or the current status."""


class OrderAlreadyHasDriver(OrderError):
    message = "This order already has a driver"


class InvalidPage(OrderError):
    message = "Invalid page"
