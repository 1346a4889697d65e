"""Integration message consumers for the Ordering domain.

Bridges inbound bus topics to the Order event handlers: each payload is
turned into the shared cross-domain event contract and handed to the same
handler method Protean would invoke for a stream event.
"""

import json

import structlog
from shared.events.inventory import StockReserved
from shared.events.payments import PaymentApproved

from ordering.messaging.port import IntegrationMessage, MessageBus
from ordering.order.inventory_events import InventoryOrderEventHandler
from ordering.order.payment_events import PaymentOrderEventHandler
from ordering.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

PAYMENT_APPROVED_TOPIC = "payment.approved"
STOCK_RESERVED_TOPIC = "stock.reserved"


def payment_approved_from_payload(payload: dict) -> PaymentApproved:
    return PaymentApproved(
        order_id=payload["order_id"],
        payment_id=payload["payment_id"],
        approved_amount=payload.get("approved_amount", 0.0),
        currency=payload.get("currency", "USD"),
        approved_at=payload.get("timestamp"),
    )


def stock_reserved_from_payload(payload: dict) -> StockReserved:
    items = payload.get("items")
    return StockReserved(
        order_id=payload["order_id"],
        reservation_id=payload["reservation_id"],
        items=items if isinstance(items, str) or items is None else json.dumps(items),
        reserved_at=payload.get("timestamp"),
    )


class OrderingConsumer:
    """Subscribes the Ordering domain to payment and stock topics."""

    def __init__(self, bus: MessageBus) -> None:
        self.bus = bus
        self.payment_handler = PaymentOrderEventHandler()
        self.inventory_handler = InventoryOrderEventHandler()

    def register(self) -> None:
        self.bus.subscribe(PAYMENT_APPROVED_TOPIC, self.on_payment_approved)
        self.bus.subscribe(STOCK_RESERVED_TOPIC, self.on_stock_reserved)

    def on_payment_approved(self, message: IntegrationMessage) -> None:
        add_context(message_id=message.message_id, correlation_id=message.correlation_id)
        try:
            logger.info("Received payment approval", topic=message.topic)
            self.payment_handler.on_payment_approved(payment_approved_from_payload(message.payload))
        finally:
            clear_context()

    def on_stock_reserved(self, message: IntegrationMessage) -> None:
        add_context(message_id=message.message_id, correlation_id=message.correlation_id)
        try:
            logger.info("Received stock reservation", topic=message.topic)
            self.inventory_handler.on_stock_reserved(stock_reserved_from_payload(message.payload))
        finally:
            clear_context()


def register_consumers(bus: MessageBus | None = None) -> OrderingConsumer:
    """Subscribe the Ordering consumers on ``bus`` (the current bus by default)."""
    if bus is None:
        from ordering.messaging import get_message_bus

        bus = get_message_bus()

    consumer = OrderingConsumer(bus)
    consumer.register()
    return consumer
