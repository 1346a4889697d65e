"""Tests for the custom ShoppingCart and Order repository lookups."""

from ordering.cart.cart import ShoppingCart
from ordering.order.order import Order
from ordering.shared.identifiers import CartId, OrderId
from protean import current_domain


class TestShoppingCartRepository:
    def test_find_by_id(self):
        repo = current_domain.repository_for(ShoppingCart)
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item("TEA-EARL-001", 2)
        repo.add(cart)

        found = repo.find_by_id(cart.id)
        assert found.quantity_of("TEA-EARL-001") == 2

    def test_find_by_id_missing_returns_none(self):
        assert current_domain.repository_for(ShoppingCart).find_by_id(CartId.generate()) is None

    def test_find_by_customer_id(self):
        repo = current_domain.repository_for(ShoppingCart)
        repo.add(ShoppingCart.create(customer_id="cust-001"))
        repo.add(ShoppingCart.create(customer_id="cust-001"))
        repo.add(ShoppingCart.create(customer_id="cust-002"))

        assert len(repo.find_by_customer_id("cust-001")) == 2
        assert repo.find_by_customer_id("cust-404") == []

    def test_delete(self):
        repo = current_domain.repository_for(ShoppingCart)
        cart = ShoppingCart.create(customer_id="cust-001")
        repo.add(cart)

        repo.delete(cart.id)
        assert repo.find_by_id(cart.id) is None

    def test_delete_missing_is_noop(self):
        current_domain.repository_for(ShoppingCart).delete(CartId.generate())


class TestOrderRepository:
    def test_find_by_cart_id(self, make_order):
        cart_id = CartId.generate()
        order = make_order(cart_id=cart_id)
        repo = current_domain.repository_for(Order)
        repo.add(order)

        found = repo.find_by_cart_id(cart_id)
        assert found.id == order.id
        assert found.item_count() == 2

    def test_find_by_cart_id_missing_returns_none(self):
        assert current_domain.repository_for(Order).find_by_cart_id(CartId.generate()) is None

    def test_find_by_id_missing_returns_none(self):
        assert current_domain.repository_for(Order).find_by_id(OrderId.generate()) is None

    def test_round_trip_keeps_processed_ids(self, make_order):
        order = make_order()
        order.mark_as_paid("pay-001")
        repo = current_domain.repository_for(Order)
        repo.add(order)

        stored = repo.find_by_id(order.id)
        assert stored.has_processed_payment("pay-001")
        assert stored.total_amount == order.total_amount
        assert stored.shipping_address == order.shipping_address
