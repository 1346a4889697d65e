"""Cross-domain event contracts for Inventory domain events.

These classes define the event shape for consumption by other domains
(e.g., the Ordering domain's stock event handler). They are registered as
external events via domain.register_external_event() with matching
__type__ strings so Protean's stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Text


class StockReserved(BaseEvent):
    """Stock was reserved for every line of an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    reservation_id = Identifier(required=True)
    items = Text()  # JSON: list of {product_id, quantity}
    reserved_at = DateTime()
