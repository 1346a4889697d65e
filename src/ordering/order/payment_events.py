"""Inbound cross-domain event handler — Ordering reacts to Payments events.

Listens for PaymentApproved from the Payments domain and marks the matching
Order as paid. Delivery is at-least-once, so the same approval may arrive
several times; the Order itself recognises payment ids it has already
applied, which makes redelivery a no-op.

Cross-domain events are imported from shared.events.payments and registered
as external events via ordering.register_external_event().
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.payments import PaymentApproved

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.utils.locking import serialized

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
ordering.register_external_event(PaymentApproved, "Payments.PaymentApproved.v1")


@ordering.event_handler(part_of=Order, stream_category="payments::payment")
class PaymentOrderEventHandler:
    """Reacts to Payments domain events to advance the Order lifecycle."""

    @serialized("order", "order_id")
    @handle(PaymentApproved)
    def on_payment_approved(self, event: PaymentApproved) -> None:
        order_id = str(event.order_id)
        payment_id = str(event.payment_id)

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning("Payment approved for unknown order, ignoring", order_id=order_id, payment_id=payment_id)
            return

        try:
            applied = order.mark_as_paid(payment_id)
        except ValidationError as exc:
            logger.error(
                "Could not apply payment approval to order",
                order_id=order_id,
                payment_id=payment_id,
                status=order.status,
                error=exc.messages,
            )
            raise

        if not applied:
            logger.info("Duplicate payment approval ignored", order_id=order_id, payment_id=payment_id)
            return

        repo.add(order)
        logger.info("Order marked as paid", order_id=order_id, payment_id=payment_id)
