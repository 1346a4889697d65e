"""Domain events for the Order aggregate.

Each event carries its own ``event_id`` and ``occurred_at`` so that
downstream consumers can deduplicate and order them independently of the
transport envelope.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order was created from a checked-out cart and awaits payment."""

    __version__ = 1

    event_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_name, sku, quantity, unit_price, ...}
    total_amount = Float(required=True)
    currency = String(required=True, max_length=3)
    shipping_address = Text(required=True)  # JSON
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for the order was approved."""

    __version__ = 1

    event_id = Identifier(required=True)
    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStockReserved:
    """Stock for a paid order was reserved."""

    __version__ = 1

    event_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reservation_id = Identifier(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before stock was reserved."""

    __version__ = 1

    event_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    previous_state = String(required=True, max_length=50)
    occurred_at = DateTime(required=True)
