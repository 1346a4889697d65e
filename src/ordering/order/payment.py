"""Order payment — command and handler.

Lets an operator (or a synchronous payment flow) mark an order as paid
directly. Same idempotency as the PaymentApproved event handler: repeating a
payment id changes nothing and publishes nothing.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.utils.locking import serialized


@ordering.command(part_of="Order")
class MarkOrderAsPaid:
    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @serialized("order", "order_id")
    @handle(MarkOrderAsPaid)
    def mark_order_as_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.mark_as_paid(command.payment_id):
            repo.add(order)
