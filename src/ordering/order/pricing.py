"""Order pricing — turns cart lines into priced order items.

A domain service: it consults the catalog for product snapshots and the
pricing collaborator for prices, then cross-checks that the pricing result
is internally consistent before any Order is built from it.
"""

from dataclasses import dataclass, field

import structlog

from ordering.gateways.port import CatalogGateway, PricingGateway, PricingInput, ProductPricingFailed
from ordering.order.order import OrderItem, ProductSnapshot
from ordering.shared.money import Money

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricedOrder:
    items: list[OrderItem] = field(default_factory=list)
    order_level_discount: Money | None = None
    order_total: Money | None = None


class OrderPricingService:
    def __init__(self, catalog: CatalogGateway, pricing: PricingGateway) -> None:
        self.catalog = catalog
        self.pricing = pricing

    def price(self, cart_items) -> PricedOrder:
        """Price ``cart_items`` (``CartLine`` values).

        Catalog and pricing failures propagate unchanged. A result that leaves
        a product unpriced, or whose total disagrees with its own lines,
        raises ``ProductPricingFailed``.
        """
        cart_items = list(cart_items)

        result = self.pricing.calculate_pricing(
            [PricingInput(product_id=line.product_id, quantity=line.quantity) for line in cart_items]
        )
        if result.order_total is None:
            raise ProductPricingFailed("Pricing result did not include an order total")

        currency = result.order_total.currency
        order_level_discount = result.order_level_discount or Money.zero(currency)
        priced_by_product = {item.product_id: item for item in result.items}

        order_items = []
        for line in cart_items:
            item_pricing = priced_by_product.get(line.product_id)
            if item_pricing is None:
                raise ProductPricingFailed(f"Pricing result is missing product {line.product_id}")

            product_data = self.catalog.get_product_data(line.product_id)
            order_item = OrderItem.build(
                product_id=line.product_id,
                product=ProductSnapshot.capture(
                    name=product_data.name,
                    description=product_data.description,
                    sku=product_data.sku,
                ),
                quantity=line.quantity,
                unit_price=item_pricing.unit_price,
                item_discount=item_pricing.item_discount,
            )
            if not order_item.line_total().same_as(item_pricing.line_total):
                logger.warning(
                    "Pricing line total does not match unit price and discount",
                    product_id=line.product_id,
                    expected_line_total=str(order_item.line_total()),
                    reported_line_total=str(item_pricing.line_total),
                )
                raise ProductPricingFailed(
                    f"Pricing line total {item_pricing.line_total} for product {line.product_id} "
                    f"does not match {order_item.line_total()}"
                )
            order_items.append(order_item)

        subtotal = Money.zero(currency)
        for item in order_items:
            subtotal = subtotal.add(item.line_total())

        if subtotal.cents < order_level_discount.cents:
            raise ProductPricingFailed(
                f"Order level discount {order_level_discount} exceeds the items total {subtotal}"
            )
        expected_total = subtotal.subtract(order_level_discount)

        if not expected_total.same_as(result.order_total):
            logger.warning(
                "Pricing total does not match priced lines",
                expected_total=str(expected_total),
                reported_total=str(result.order_total),
            )
            raise ProductPricingFailed(
                f"Pricing total {result.order_total} does not match items total {subtotal} "
                f"minus discount {order_level_discount}"
            )

        return PricedOrder(
            items=order_items,
            order_level_discount=order_level_discount,
            order_total=expected_total,
        )
