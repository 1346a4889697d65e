"""Repository for the ShoppingCart aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    """Lookups that return ``None`` instead of raising when nothing matches.

    ``get`` and ``add`` come from the base repository.
    """

    def find_by_id(self, cart_id) -> ShoppingCart | None:
        try:
            return self.get(str(cart_id))
        except ObjectNotFoundError:
            return None

    def find_by_customer_id(self, customer_id) -> list[ShoppingCart]:
        return self._dao.query.filter(customer_id=str(customer_id)).all().items

    def delete(self, cart_id) -> None:
        cart = self.find_by_id(cart_id)
        if cart is not None:
            self._dao.delete(cart)
