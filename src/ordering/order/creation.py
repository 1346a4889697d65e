"""Order creation — builds an Order from a checked-out cart and its pricing."""

from ordering.cart.cart import ShoppingCart
from ordering.exceptions import EmptyCartError
from ordering.order.order import Order, ShippingAddress
from ordering.order.pricing import PricedOrder
from ordering.shared.identifiers import OrderId


class OrderCreationService:
    def can_convert_cart(self, cart: ShoppingCart) -> bool:
        return not cart.is_empty() and not cart.is_converted()

    def create_from_cart(self, cart: ShoppingCart, priced: PricedOrder, shipping_address: ShippingAddress) -> Order:
        """Create a new order awaiting payment. The cart itself is left untouched."""
        if cart.is_empty():
            raise EmptyCartError({"cart": ["Cannot create an order from an empty cart"]})

        return Order.create(
            order_id=OrderId.generate(),
            cart_id=str(cart.id),
            customer_id=str(cart.customer_id),
            items=priced.items,
            shipping_address=shipping_address,
            order_level_discount=priced.order_level_discount,
            total_amount=priced.order_total,
        )
