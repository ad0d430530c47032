"""Order pricing."""
from typing import Iterable, List, Optional

from app.services.ordering.errors import ChoiceNotFound, OptionNotFound
from app.services.ordering.models import DishOption, OrderItemOption


def parse_dish_options(raw_options: Optional[list]) -> List[DishOption]:
    """Parse the JSON options column of a dish."""
    return [DishOption.model_validate(option) for option in raw_options or []]


def price_item(
    base_price: float,
    dish_options: List[DishOption],
    selections: List[OrderItemOption],
) -> float:
    """
    Compute the price contribution of one order item.

    Args:
        base_price: Dish base price
        dish_options: Options offered by the dish
        selections: Options (and choices) selected by the customer

    Returns:
        Base price plus the extra charge of every selected option and choice

    Raises:
        OptionNotFound: A selection names an option the dish does not offer
        ChoiceNotFound: A selection names a choice missing from its option
    """
    price = base_price
    for selection in selections:
        option = next((o for o in dish_options if o.name == selection.name), None)
        if option is None:
            raise OptionNotFound(selection.name)
        if option.extra:
            price += option.extra

        # An option selected without a choice only adds its own extra
        if selection.choice is None:
            continue

        choice = next((c for c in option.choices if c.name == selection.choice), None)
        if choice is None:
            raise ChoiceNotFound(selection.choice)
        if choice.extra:
            price += choice.extra
    return price


def price_order(contributions: Iterable[float]) -> float:
    """Sum item contributions into the order total."""
    return sum(contributions, 0.0)
