"""Unit tests for order pricing."""
import pytest

from app.services.ordering.errors import ChoiceNotFound, OptionNotFound
from app.services.ordering.models import OrderItemOption
from app.services.ordering.pricing import parse_dish_options, price_item, price_order


@pytest.fixture
def dish_options():
    """Options column of a dish, as stored in the database."""
    return parse_dish_options(
        [
            {
                "name": "Spice",
                "extra": 1,
                "choices": [{"name": "Mild"}, {"name": "Hot", "extra": 1}],
            },
            {
                "name": "Size",
                "extra": 2,
                "choices": [{"name": "Regular"}, {"name": "Large", "extra": 3}],
            },
            {"name": "Sauce", "choices": [{"name": "Salsa", "extra": 0.5}]},
            {"name": "Egg"},
        ]
    )


class TestPriceItem:
    """Test single item pricing."""

    def test_no_selections_is_base_price(self, dish_options):
        assert price_item(10, dish_options, []) == 10

    def test_option_extras_are_added(self, dish_options):
        """Base 10 with options of extra 1 and 2 comes to 13."""
        selections = [OrderItemOption(name="Spice"), OrderItemOption(name="Size")]

        assert price_item(10, dish_options, selections) == 13

    def test_option_and_choice_extras_are_added(self, dish_options):
        selections = [
            OrderItemOption(name="Spice", choice="Hot"),
            OrderItemOption(name="Size", choice="Large"),
        ]

        # 10 + (1 + 1) + (2 + 3)
        assert price_item(10, dish_options, selections) == 17

    def test_choice_without_extra_adds_nothing(self, dish_options):
        selections = [OrderItemOption(name="Spice", choice="Mild")]

        assert price_item(10, dish_options, selections) == 11

    def test_choice_extra_on_option_without_extra(self, dish_options):
        selections = [OrderItemOption(name="Sauce", choice="Salsa")]

        assert price_item(10, dish_options, selections) == 10.5

    def test_option_without_extra_or_choices(self, dish_options):
        assert price_item(10, dish_options, [OrderItemOption(name="Egg")]) == 10

    def test_unknown_option_raises(self, dish_options):
        with pytest.raises(OptionNotFound) as exc_info:
            price_item(10, dish_options, [OrderItemOption(name="Cheese")])

        assert exc_info.value.message == "Dish option Cheese not found."

    def test_unknown_choice_raises(self, dish_options):
        with pytest.raises(ChoiceNotFound) as exc_info:
            price_item(10, dish_options, [OrderItemOption(name="Spice", choice="Extreme")])

        assert exc_info.value.message == "Dish option choice Extreme not found."

    def test_choice_on_option_without_choices_raises(self, dish_options):
        with pytest.raises(ChoiceNotFound):
            price_item(10, dish_options, [OrderItemOption(name="Egg", choice="Fried")])

    def test_option_names_are_case_sensitive(self, dish_options):
        with pytest.raises(OptionNotFound):
            price_item(10, dish_options, [OrderItemOption(name="spice")])

    def test_dish_without_options(self):
        assert price_item(4, parse_dish_options(None), []) == 4
        with pytest.raises(OptionNotFound):
            price_item(4, parse_dish_options(None), [OrderItemOption(name="Spice")])


class TestPriceOrder:
    """Test order total."""

    def test_sums_contributions(self):
        assert price_order([13, 4, 3]) == 20

    def test_empty_order_is_zero(self):
        assert price_order([]) == 0.0
