"""Inbound cross-domain event handler — Ordering reacts to Inventory events.

Listens for StockReserved from the Inventory domain and records the
reservation on the paid Order. Redelivered reservations are recognised by
the Order and ignored.

Cross-domain events are imported from shared.events.inventory and registered
as external events via ordering.register_external_event().
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.inventory import StockReserved

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.utils.locking import serialized

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
ordering.register_external_event(StockReserved, "Inventory.StockReserved.v1")


@ordering.event_handler(part_of=Order, stream_category="inventory::inventory_item")
class InventoryOrderEventHandler:
    """Reacts to Inventory domain events to record stock reservations."""

    @serialized("order", "order_id")
    @handle(StockReserved)
    def on_stock_reserved(self, event: StockReserved) -> None:
        order_id = str(event.order_id)
        reservation_id = str(event.reservation_id)

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning(
                "Stock reserved for unknown order, ignoring", order_id=order_id, reservation_id=reservation_id
            )
            return

        try:
            applied = order.reserve_stock(reservation_id)
        except ValidationError as exc:
            logger.error(
                "Could not apply stock reservation to order",
                order_id=order_id,
                reservation_id=reservation_id,
                status=order.status,
                error=exc.messages,
            )
            raise

        if not applied:
            logger.info("Duplicate stock reservation ignored", order_id=order_id, reservation_id=reservation_id)
            return

        repo.add(order)
        logger.info("Stock reservation recorded on order", order_id=order_id, reservation_id=reservation_id)
