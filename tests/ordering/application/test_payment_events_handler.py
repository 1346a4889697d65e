"""Application tests for the PaymentApproved event handler."""

from datetime import UTC, datetime

import pytest
from ordering.exceptions import InvalidOrderStateTransition
from ordering.order.order import Order, OrderStatus
from ordering.order.payment_events import PaymentOrderEventHandler
from ordering.shared.identifiers import OrderId
from protean import current_domain
from shared.events.payments import PaymentApproved


def _approved(order_id, payment_id="pay-001", amount=65.97):
    return PaymentApproved(
        order_id=order_id,
        payment_id=payment_id,
        approved_amount=amount,
        currency="USD",
        approved_at=datetime.now(UTC),
    )


@pytest.fixture()
def stored_order(make_order):
    order = make_order()
    current_domain.repository_for(Order).add(order)
    return order


class TestPaymentApprovedHandler:
    def test_marks_order_paid(self, stored_order, bus):
        PaymentOrderEventHandler().on_payment_approved(_approved(stored_order.id))

        order = current_domain.repository_for(Order).get(stored_order.id)
        assert order.status == OrderStatus.PAID.value
        assert order.payment_id == "pay-001"
        assert order.has_processed_payment("pay-001")

    def test_publishes_order_paid(self, stored_order, bus):
        PaymentOrderEventHandler().on_payment_approved(_approved(stored_order.id))

        messages = bus.messages_for("order.paid")
        assert len(messages) == 1
        assert messages[0].payload["order_id"] == stored_order.id
        assert messages[0].payload["payment_id"] == "pay-001"

    def test_duplicate_delivery_is_noop(self, stored_order, bus):
        handler = PaymentOrderEventHandler()
        handler.on_payment_approved(_approved(stored_order.id))
        handler.on_payment_approved(_approved(stored_order.id))

        order = current_domain.repository_for(Order).get(stored_order.id)
        assert order.status == OrderStatus.PAID.value
        assert len(bus.messages_for("order.paid")) == 1

    def test_conflicting_payment_is_rejected(self, stored_order, bus):
        handler = PaymentOrderEventHandler()
        handler.on_payment_approved(_approved(stored_order.id, payment_id="p1"))

        with pytest.raises(InvalidOrderStateTransition):
            handler.on_payment_approved(_approved(stored_order.id, payment_id="p2"))

        order = current_domain.repository_for(Order).get(stored_order.id)
        assert order.payment_id == "p1"
        assert len(bus.messages_for("order.paid")) == 1

    def test_unknown_order_is_ignored(self, bus):
        PaymentOrderEventHandler().on_payment_approved(_approved(OrderId.generate()))
        assert bus.published == []

    def test_cancelled_order_rejects_payment(self, make_order, bus):
        order = make_order()
        order.cancel("customer request")
        order._events.clear()
        current_domain.repository_for(Order).add(order)

        with pytest.raises(InvalidOrderStateTransition):
            PaymentOrderEventHandler().on_payment_approved(_approved(order.id))

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.CANCELLED.value
