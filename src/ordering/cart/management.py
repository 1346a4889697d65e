"""Cart management — creating a cart for a customer."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new, empty shopping cart for a customer."""

    customer_id = Identifier(required=True)
    cart_id = Identifier()  # Optional; generated when omitted


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(customer_id=command.customer_id, cart_id=command.cart_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)
