"""Catalog and pricing gateway ports (abstract interfaces).

Checkout depends only on these contracts, so the deterministic stub
adapters used in development and tests can be swapped for real catalog and
pricing services without touching domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ordering.shared.money import Money
from ordering.shared.quantity import Quantity


class GatewayError(Exception):
    """A collaborator could not answer the request."""


class ProductDataUnavailable(GatewayError):
    """The catalog has no data for the requested product."""


class ProductPricingFailed(GatewayError):
    """Pricing could not produce a usable result."""


@dataclass(frozen=True)
class ProductData:
    name: str
    description: str
    sku: str


@dataclass(frozen=True)
class PricingInput:
    product_id: str
    quantity: Quantity


@dataclass(frozen=True)
class ItemPricing:
    product_id: str
    unit_price: Money
    item_discount: Money
    line_total: Money


@dataclass(frozen=True)
class PricingResult:
    items: list[ItemPricing] = field(default_factory=list)
    order_level_discount: Money | None = None
    order_total: Money | None = None


class CatalogGateway(ABC):
    @abstractmethod
    def get_product_data(self, product_id: str) -> ProductData:
        """Return catalog details for a product or raise ``ProductDataUnavailable``."""
        ...


class PricingGateway(ABC):
    @abstractmethod
    def calculate_pricing(self, items: list[PricingInput]) -> PricingResult:
        """Price a set of cart lines, including order-level discounts."""
        ...
