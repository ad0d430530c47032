"""Unit tests for the access control gate."""
import pytest

from app.services.ordering.errors import AccessDenied, Forbidden, InvalidTransition
from app.services.ordering.models import Caller, OrderSnapshot
from app.services.ordering.permissions import (
    AccessControlGate,
    Operation,
    OPERATION_ROLES,
    ROLE_ALLOWED_STATUSES,
)
from app.services.ordering.statuses import OrderStatus, UserRole

CUSTOMER = Caller(id=1, role=UserRole.CLIENT)
OWNER = Caller(id=2, role=UserRole.OWNER)
DRIVER = Caller(id=3, role=UserRole.DELIVERY)
STRANGERS = [
    Caller(id=99, role=UserRole.CLIENT),
    Caller(id=98, role=UserRole.OWNER),
    Caller(id=97, role=UserRole.DELIVERY),
]


@pytest.fixture
def gate():
    return AccessControlGate()


@pytest.fixture
def order():
    return OrderSnapshot(
        id=1,
        status=OrderStatus.PENDING,
        customer_id=CUSTOMER.id,
        driver_id=DRIVER.id,
        owner_id=OWNER.id,
    )


class TestAuthorize:
    """Test role x operation table."""

    @pytest.mark.parametrize(
        "operation,allowed",
        [
            (Operation.CREATE_ORDER, {UserRole.CLIENT}),
            (Operation.TAKE_ORDER, {UserRole.DELIVERY}),
            (Operation.PENDING_ORDERS, {UserRole.OWNER}),
            (Operation.COOKED_ORDERS, {UserRole.DELIVERY}),
            (Operation.GET_ORDER, set(UserRole)),
            (Operation.GET_ORDERS, set(UserRole)),
            (Operation.EDIT_ORDER, set(UserRole)),
            (Operation.ORDER_UPDATES, set(UserRole)),
        ],
    )
    def test_operation_roles(self, gate, operation, allowed):
        for caller in (CUSTOMER, OWNER, DRIVER):
            if caller.role in allowed:
                assert gate.authorize(caller, operation) is caller
            else:
                with pytest.raises(AccessDenied):
                    gate.authorize(caller, operation)

    def test_every_operation_has_roles(self):
        assert set(OPERATION_ROLES) == set(Operation)

    def test_anonymous_caller_denied(self, gate):
        with pytest.raises(AccessDenied) as exc_info:
            gate.authorize(None, Operation.GET_ORDER)

        assert exc_info.value.message == "Forbidden resource"


class TestVisibility:
    """Test order visibility rule."""

    def test_parties_can_see_order(self, gate, order):
        for caller in (CUSTOMER, OWNER, DRIVER):
            assert gate.can_see_order(caller, order) is True
            gate.check_visible(caller, order)

    @pytest.mark.parametrize("stranger", STRANGERS)
    def test_unrelated_user_cannot_see_order(self, gate, order, stranger):
        assert gate.can_see_order(stranger, order) is False
        with pytest.raises(Forbidden) as exc_info:
            gate.check_visible(stranger, order)

        assert exc_info.value.message == "You can't see other peoples' orders"

    def test_unassigned_driver_cannot_see_order(self, gate):
        unassigned = OrderSnapshot(
            id=1, status=OrderStatus.COOKED, customer_id=CUSTOMER.id, owner_id=OWNER.id
        )

        assert gate.can_see_order(DRIVER, unassigned) is False


class TestStatusChange:
    """Test role x target status table."""

    def test_role_table(self):
        assert ROLE_ALLOWED_STATUSES[UserRole.CLIENT] == frozenset()
        assert ROLE_ALLOWED_STATUSES[UserRole.OWNER] == {OrderStatus.COOKING, OrderStatus.COOKED}
        assert ROLE_ALLOWED_STATUSES[UserRole.DELIVERY] == {
            OrderStatus.PICKED_UP,
            OrderStatus.DELIVERED,
        }

    @pytest.mark.parametrize("caller", [CUSTOMER, OWNER, DRIVER])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_every_pair_outside_table_is_rejected(self, gate, caller, target):
        if target in ROLE_ALLOWED_STATUSES[caller.role]:
            gate.check_status_change(caller, target)
            return

        with pytest.raises(InvalidTransition) as exc_info:
            gate.check_status_change(caller, target)

        assert exc_info.value.message == (
            f"{caller.role.value} can't edit order status to {target.value}"
        )


class TestLadder:
    """Test status ladder."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.COOKING),
            (OrderStatus.COOKING, OrderStatus.COOKED),
            (OrderStatus.COOKED, OrderStatus.PICKED_UP),
            (OrderStatus.PICKED_UP, OrderStatus.DELIVERED),
        ],
    )
    def test_next_status_allowed(self, gate, current, target):
        gate.check_ladder(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.COOKED),
            (OrderStatus.COOKED, OrderStatus.COOKING),
            (OrderStatus.COOKING, OrderStatus.COOKING),
            (OrderStatus.DELIVERED, OrderStatus.PENDING),
        ],
    )
    def test_skips_and_backward_moves_rejected(self, gate, current, target):
        with pytest.raises(InvalidTransition) as exc_info:
            gate.check_ladder(current, target)

        assert exc_info.value.message == (
            f"Order status can't change from {current.value} to {target.value}"
        )

    def test_delivered_is_terminal(self):
        assert OrderStatus.DELIVERED.next() is None
        assert OrderStatus.PENDING.next() == OrderStatus.COOKING
