"""Ordering bounded context — Shopping Cart and Order lifecycle.

Handles cart management, the idempotent checkout that converts a cart into
an Order, and the payment/stock-reservation state machine driven by events
from the Payments and Inventory contexts.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

ordering = Domain(name="ordering")

logger = get_logger(__name__)
