"""Relays committed Order events onto the message bus.

Protean dispatches an aggregate's events to its event handlers only after the
unit of work that saved the aggregate has committed. Publishing from here
means a failed save never produces an integration message.
"""

import structlog
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.messaging import get_publisher
from ordering.order.events import OrderCancelled, OrderPaid, OrderPlaced, OrderStockReserved
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.event_handler(part_of=Order)
class OrderIntegrationRelay:
    def _relay(self, event) -> None:
        sent = get_publisher().publish_domain_events([event])
        logger.debug("Relayed committed order event", event_type=type(event).__name__, messages=len(sent))

    @handle(OrderPlaced)
    def order_placed(self, event: OrderPlaced) -> None:
        self._relay(event)

    @handle(OrderPaid)
    def order_paid(self, event: OrderPaid) -> None:
        self._relay(event)

    @handle(OrderStockReserved)
    def order_stock_reserved(self, event: OrderStockReserved) -> None:
        self._relay(event)

    @handle(OrderCancelled)
    def order_cancelled(self, event: OrderCancelled) -> None:
        self._relay(event)
