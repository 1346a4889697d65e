"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartConverted, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from ordering.order.events import OrderCancelled, OrderPaid, OrderPlaced, OrderStockReserved
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderPaid": OrderPaid,
    "OrderStockReserved": OrderStockReserved,
    "OrderCancelled": OrderCancelled,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartItemQuantityUpdated": CartItemQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartConverted": CartConverted,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def outcome():
    """Container for the return value of an idempotent transition."""
    return {"applied": None}


# ---------------------------------------------------------------------------
# Given steps — Shopping Cart
# ---------------------------------------------------------------------------
@given("an active cart", target_fixture="cart")
def active_cart():
    cart = ShoppingCart.create(customer_id="cust-001")
    cart._events.clear()
    return cart


@given(parsers.cfparse('the cart holds {qty:d} of "{product_id}"'), target_fixture="cart")
def cart_holding(cart, qty, product_id):
    cart.add_item(product_id, qty)
    cart._events.clear()
    return cart


@given("the cart is converted", target_fixture="cart")
def converted_cart(cart):
    if cart.is_empty():
        cart.add_item("COFFEE-COL-001", 1)
    cart.mark_as_converted()
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Given steps — Order
# ---------------------------------------------------------------------------
@given("an order awaiting payment", target_fixture="order")
def order_awaiting_payment(make_order):
    return make_order()


@given(parsers.cfparse('the order was paid with "{payment_id}"'), target_fixture="order")
def order_paid(order, payment_id):
    order.mark_as_paid(payment_id)
    order.clear_domain_events()
    return order


@given(parsers.cfparse('stock was reserved with "{reservation_id}"'), target_fixture="order")
def order_stock_reserved(order, reservation_id):
    order.reserve_stock(reservation_id)
    order.clear_domain_events()
    return order


# ---------------------------------------------------------------------------
# Then steps — Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart status is "{status}"'))
def cart_status_is(cart, status):
    assert cart.status == status


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"


@then("no cart event is raised")
def no_cart_event(cart):
    assert cart._events == []


# ---------------------------------------------------------------------------
# Then steps — Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in order.domain_events())


@then("no order event is raised")
def no_order_event(order):
    assert order.domain_events() == []
