"""Application tests for MarkOrderAsPaid and CancelOrder commands."""

import pytest
from ordering.exceptions import InvalidOrderStateTransition
from ordering.order.cancellation import CancelOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.payment import MarkOrderAsPaid
from ordering.shared.identifiers import OrderId
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def order_id(make_order):
    order = make_order()
    current_domain.repository_for(Order).add(order)
    return order.id


def _pay(order_id, payment_id="pay-001"):
    current_domain.process(MarkOrderAsPaid(order_id=order_id, payment_id=payment_id), asynchronous=False)


def _cancel(order_id, reason):
    current_domain.process(CancelOrder(order_id=order_id, reason=reason), asynchronous=False)


class TestMarkOrderAsPaidCommand:
    def test_marks_paid_and_publishes(self, order_id, bus):
        _pay(order_id)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PAID.value
        assert len(bus.messages_for("order.paid")) == 1

    def test_repeated_command_is_noop(self, order_id, bus):
        _pay(order_id)
        _pay(order_id)
        assert len(bus.messages_for("order.paid")) == 1

    def test_unknown_order_fails(self, bus):
        with pytest.raises(ObjectNotFoundError):
            _pay(OrderId.generate())


class TestCancelOrderCommand:
    def test_cancel_paid_order(self, order_id, bus):
        _pay(order_id)
        _cancel(order_id, "refund requested")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.payment_id == "pay-001"
        assert order.cancellation_reason == "refund requested"

        payload = bus.messages_for("order.cancelled")[0].payload
        assert payload["previous_status"] == "PAID"
        assert payload["reason"] == "refund requested"

    def test_empty_reason_rejected(self, order_id, bus):
        with pytest.raises(ValidationError):
            _cancel(order_id, "")
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.AWAITING_PAYMENT.value
        assert bus.messages_for("order.cancelled") == []

    def test_cancel_twice_fails(self, order_id, bus):
        _cancel(order_id, "first")
        with pytest.raises(InvalidOrderStateTransition):
            _cancel(order_id, "second")
