import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalog():
    from ordering.gateways import set_catalog_gateway
    from ordering.gateways.fake_adapter import StubCatalogGateway

    gateway = StubCatalogGateway()
    set_catalog_gateway(gateway)
    return gateway


@pytest.fixture()
def pricing():
    from ordering.gateways import set_pricing_gateway
    from ordering.gateways.fake_adapter import StubPricingGateway

    gateway = StubPricingGateway()
    set_pricing_gateway(gateway)
    return gateway


@pytest.fixture()
def bus():
    from ordering.messaging import set_message_bus
    from ordering.messaging.memory_bus import InMemoryMessageBus

    message_bus = InMemoryMessageBus()
    set_message_bus(message_bus)
    return message_bus


@pytest.fixture()
def shipping_address_data():
    return {
        "street": "123 Main St",
        "address_line2": "Apt 4B",
        "city": "Springfield",
        "state_or_province": "IL",
        "postal_code": "62701",
        "country": "US",
    }


@pytest.fixture()
def shipping_address_json(shipping_address_data):
    return json.dumps(shipping_address_data)


@pytest.fixture()
def make_order_item():
    """Factory for priced order lines."""
    from ordering.order.order import OrderItem, ProductSnapshot
    from ordering.shared.money import Money

    def _make(product_id="COFFEE-COL-001", quantity=2, unit_price=24.99, item_discount=0.0, currency="USD"):
        return OrderItem.build(
            product_id=product_id,
            product=ProductSnapshot.capture(
                name=f"Product {product_id}",
                description=f"Description of {product_id}",
                sku=product_id,
            ),
            quantity=quantity,
            unit_price=Money.of(unit_price, currency),
            item_discount=Money.of(item_discount, currency),
        )

    return _make


@pytest.fixture()
def make_order(make_order_item, shipping_address_data):
    """Factory for orders awaiting payment, with a consistent total.

    Pending domain events are cleared unless ``keep_events`` is set.
    """
    from ordering.order.order import Order, ShippingAddress
    from ordering.shared.identifiers import CartId, OrderId
    from ordering.shared.money import Money, to_cents

    def _make(items=None, order_level_discount=0.0, currency="USD", cart_id=None, keep_events=False):
        items = items or [
            make_order_item("COFFEE-COL-001", 2, 24.99, currency=currency),
            make_order_item("MUG-CERAMIC-001", 1, 15.99, currency=currency),
        ]
        subtotal = sum((item.line_total().cents for item in items), to_cents(0))
        order = Order.create(
            order_id=OrderId.generate(),
            cart_id=cart_id or CartId.generate(),
            customer_id="cust-001",
            items=items,
            shipping_address=ShippingAddress.from_dict(shipping_address_data),
            order_level_discount=Money.of(order_level_discount, currency),
            total_amount=Money.of(subtotal - to_cents(order_level_discount), currency),
        )
        if not keep_events:
            order._events.clear()
        return order

    return _make
