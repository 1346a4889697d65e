"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_id(self, order_id) -> Order | None:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            return None

    def find_by_cart_id(self, cart_id) -> Order | None:
        """The order checked out from ``cart_id``, if checkout already ran."""
        return self._dao.query.filter(cart_id=str(cart_id)).all().first
