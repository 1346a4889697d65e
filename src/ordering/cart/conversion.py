"""Checkout — converts a shopping cart into an Order.

Checkout is idempotent per cart. If an order already exists for the cart
(for example because a previous attempt saved the order but failed before
saving the cart), that order is returned and nothing is priced or published
again.

Steps for a first checkout:
    load cart → price lines (catalog + pricing) → create Order →
    save Order → mark cart converted → save cart → commit

Order events reach the message bus only after the commit, through the
Order event relay in ordering.messaging.relay.

Catalog and pricing failures propagate before anything is saved.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.exceptions import EmptyCartError, InvalidCartOperation
from ordering.gateways import get_catalog_gateway, get_pricing_gateway
from ordering.order.creation import OrderCreationService
from ordering.order.order import Order, ShippingAddress
from ordering.order.pricing import OrderPricingService
from ordering.utils.locking import serialized

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class Checkout:
    """Check out a cart, creating an order that awaits payment."""

    cart_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: {street, city, state_or_province, postal_code, country, ...}


@ordering.command_handler(part_of=ShoppingCart)
class CheckoutHandler:
    @serialized("cart", "cart_id")
    @handle(Checkout)
    def checkout(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        order_repo = current_domain.repository_for(Order)

        cart = cart_repo.get(command.cart_id)

        existing_order = order_repo.find_by_cart_id(cart.id)
        if existing_order is not None:
            if not cart.is_converted():
                cart.mark_as_converted()
                cart_repo.add(cart)
            logger.info(
                "Checkout already completed for cart, returning existing order",
                cart_id=str(cart.id),
                order_id=str(existing_order.id),
            )
            return str(existing_order.id)

        if cart.is_empty():
            raise EmptyCartError({"cart": ["Cannot check out an empty cart"]})
        if cart.is_converted():
            raise InvalidCartOperation({"status": ["Cart has already been converted to an order"]})

        address_data = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        shipping_address = ShippingAddress.from_dict(address_data)

        pricing_service = OrderPricingService(get_catalog_gateway(), get_pricing_gateway())
        priced = pricing_service.price(cart.line_items())

        order = OrderCreationService().create_from_cart(cart, priced, shipping_address)
        order_repo.add(order)

        cart.mark_as_converted()
        cart_repo.add(cart)

        logger.info(
            "Cart checked out",
            cart_id=str(cart.id),
            order_id=str(order.id),
            total_amount=order.total_amount.amount,
            currency=order.total_amount.currency,
        )
        return str(order.id)
