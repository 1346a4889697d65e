"""Deterministic stub catalog and pricing gateways for development and testing.

Both adapters serve a small fixed product range without any external calls
and can be reconfigured at runtime to fail or to return inconsistent data,
which makes checkout failure paths easy to exercise in tests.

Pricing rules:
- fixed unit prices in USD
- 10% item discount when a line has 3 or more units
- 10.00 order-level discount when the subtotal exceeds 100.00
"""

from decimal import Decimal

from ordering.gateways.port import (
    CatalogGateway,
    ItemPricing,
    PricingGateway,
    PricingInput,
    PricingResult,
    ProductData,
    ProductDataUnavailable,
    ProductPricingFailed,
)
from ordering.shared.money import Money, to_cents

DEFAULT_PRODUCTS = {
    "COFFEE-COL-001": ProductData(
        name="Premium Coffee Beans",
        description="Single-origin Arabica beans from Colombia, medium roast",
        sku="COFFEE-COL-001",
    ),
    "TEA-EARL-001": ProductData(
        name="Earl Grey Tea",
        description="Classic black tea with bergamot oil, 20 tea bags",
        sku="TEA-EARL-001",
    ),
    "MUG-CERAMIC-001": ProductData(
        name="Ceramic Coffee Mug",
        description="Handcrafted ceramic mug, 12oz capacity",
        sku="MUG-CERAMIC-001",
    ),
    "GRINDER-BURR-001": ProductData(
        name="Burr Coffee Grinder",
        description="Professional burr grinder with 15 grind settings",
        sku="GRINDER-BURR-001",
    ),
}

DEFAULT_UNIT_PRICES = {
    "COFFEE-COL-001": Decimal("24.99"),
    "TEA-EARL-001": Decimal("12.99"),
    "MUG-CERAMIC-001": Decimal("15.99"),
    "GRINDER-BURR-001": Decimal("89.99"),
}

BULK_DISCOUNT_MIN_QUANTITY = 3
BULK_DISCOUNT_RATE = Decimal("0.10")
ORDER_DISCOUNT_THRESHOLD = Decimal("100.00")
ORDER_DISCOUNT_AMOUNT = Decimal("10.00")


class StubCatalogGateway(CatalogGateway):
    """Configurable fake product catalog."""

    def __init__(self) -> None:
        self.products: dict[str, ProductData] = dict(DEFAULT_PRODUCTS)
        self.should_succeed: bool = True
        self.failure_reason: str = "Catalog service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Catalog service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_product(self, product_id: str, name: str, description: str, sku: str) -> None:
        self.products[product_id] = ProductData(name=name, description=description, sku=sku)

    def get_product_data(self, product_id: str) -> ProductData:
        self.calls.append({"method": "get_product_data", "product_id": product_id})

        if not self.should_succeed:
            raise ProductDataUnavailable(self.failure_reason)

        product = self.products.get(product_id)
        if product is None:
            raise ProductDataUnavailable(f"Product with ID {product_id} not found in catalog")
        return product


class StubPricingGateway(PricingGateway):
    """Configurable fake pricing engine."""

    def __init__(self, currency: str = "USD") -> None:
        self.unit_prices: dict[str, Decimal] = dict(DEFAULT_UNIT_PRICES)
        self.currency = currency
        self.should_succeed: bool = True
        self.failure_reason: str = "Pricing service unavailable"
        self.omitted_products: set[str] = set()
        self.total_adjustment = Decimal("0")
        self.line_adjustment = Decimal("0")
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Pricing service unavailable",
        omitted_products: tuple[str, ...] = (),
        total_adjustment: float = 0.0,
        line_adjustment: float = 0.0,
    ) -> None:
        """Configure failures, or results that are inconsistent on purpose."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.omitted_products = set(omitted_products)
        self.total_adjustment = to_cents(total_adjustment)
        self.line_adjustment = to_cents(line_adjustment)

    def set_unit_price(self, product_id: str, amount: float) -> None:
        self.unit_prices[product_id] = to_cents(amount)

    def calculate_pricing(self, items: list[PricingInput]) -> PricingResult:
        self.calls.append(
            {
                "method": "calculate_pricing",
                "items": [(item.product_id, item.quantity.value) for item in items],
            }
        )

        if not self.should_succeed:
            raise ProductPricingFailed(self.failure_reason)

        priced = []
        subtotal = Decimal("0")
        for item in items:
            unit_price = self.unit_prices.get(item.product_id)
            if unit_price is None:
                raise ProductPricingFailed(f"No price found for product {item.product_id}")

            quantity = item.quantity.value
            gross = unit_price * quantity
            discount = Decimal("0")
            if quantity >= BULK_DISCOUNT_MIN_QUANTITY:
                discount = to_cents(gross * BULK_DISCOUNT_RATE)
            line_total = gross - discount
            subtotal += line_total

            if item.product_id in self.omitted_products:
                continue

            priced.append(
                ItemPricing(
                    product_id=item.product_id,
                    unit_price=Money.of(unit_price, self.currency),
                    item_discount=Money.of(discount, self.currency),
                    line_total=Money.of(line_total + self.line_adjustment, self.currency),
                )
            )

        order_discount = ORDER_DISCOUNT_AMOUNT if subtotal > ORDER_DISCOUNT_THRESHOLD else Decimal("0")

        return PricingResult(
            items=priced,
            order_level_discount=Money.of(order_discount, self.currency),
            order_total=Money.of(subtotal - order_discount + self.total_adjustment, self.currency),
        )
