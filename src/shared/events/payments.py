"""Cross-domain event contracts for Payments domain events.

These classes define the event shape for consumption by other domains
(e.g., the Ordering domain's payment event handler). They are registered as
external events via domain.register_external_event() with matching
__type__ strings so Protean's stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class PaymentApproved(BaseEvent):
    """The payment provider approved payment for an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    approved_amount = Float(required=True, min_value=0.0)
    currency = String(required=True, max_length=3)
    approved_at = DateTime()
