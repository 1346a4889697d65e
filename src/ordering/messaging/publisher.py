"""Domain event publisher — translates Order events into integration messages.

Translation is table driven: each publishable event class maps to a topic and
a payload builder. Events without an entry are logged and skipped, so new
domain events never break publication of the ones that are mapped.
"""

import json

import structlog

from ordering.messaging.port import MessageBus
from ordering.order.events import OrderCancelled, OrderPaid, OrderPlaced, OrderStockReserved

logger = structlog.get_logger(__name__)


def _timestamp(event):
    return event.occurred_at.isoformat() if event.occurred_at else None


def _order_placed_payload(event: OrderPlaced) -> dict:
    items = json.loads(event.items) if event.items else []
    return {
        "event_id": str(event.event_id),
        "order_id": str(event.order_id),
        "customer_id": str(event.customer_id),
        "cart_id": str(event.cart_id),
        "items": [
            {
                "product_id": item["product_id"],
                "product_name": item.get("product_name"),
                "quantity": item["quantity"],
                "unit_price": item["unit_price"],
            }
            for item in items
        ],
        "total_amount": event.total_amount,
        "currency": event.currency,
        "shipping_address": json.loads(event.shipping_address) if event.shipping_address else {},
        "timestamp": _timestamp(event),
    }


def _order_paid_payload(event: OrderPaid) -> dict:
    return {
        "event_id": str(event.event_id),
        "order_id": str(event.order_id),
        "payment_id": str(event.payment_id),
        "timestamp": _timestamp(event),
    }


def _order_cancelled_payload(event: OrderCancelled) -> dict:
    return {
        "event_id": str(event.event_id),
        "order_id": str(event.order_id),
        "reason": event.reason,
        "previous_status": event.previous_state,
        "timestamp": _timestamp(event),
    }


def _order_stock_reserved_payload(event: OrderStockReserved) -> dict:
    return {
        "event_id": str(event.event_id),
        "order_id": str(event.order_id),
        "reservation_id": str(event.reservation_id),
        "timestamp": _timestamp(event),
    }


TOPIC_REGISTRY = {
    OrderPlaced: ("order.placed", _order_placed_payload),
    OrderPaid: ("order.paid", _order_paid_payload),
    OrderCancelled: ("order.cancelled", _order_cancelled_payload),
    OrderStockReserved: ("order.stock_reserved", _order_stock_reserved_payload),
}


class DomainEventPublisher:
    def __init__(self, bus: MessageBus, registry: dict | None = None) -> None:
        self.bus = bus
        self.registry = dict(TOPIC_REGISTRY if registry is None else registry)

    def register(self, event_cls, topic: str, payload_builder) -> None:
        self.registry[event_cls] = (topic, payload_builder)

    def publish_domain_events(self, events) -> list:
        """Publish every mapped event in order; returns the envelopes sent."""
        sent = []
        for event in events:
            entry = self.registry.get(type(event))
            if entry is None:
                logger.warning("No integration topic for domain event, skipping", event_type=type(event).__name__)
                continue

            topic, build_payload = entry
            message = self.bus.publish(topic, build_payload(event))
            logger.info(
                "Published integration message",
                topic=topic,
                message_id=message.message_id,
                correlation_id=message.correlation_id,
            )
            sent.append(message)
        return sent

