"""Catalog and pricing gateway factory.

Provides get_*/set_*/reset_* functions to swap implementations. The stub
adapters are the default for development and testing.
"""

from ordering.gateways.fake_adapter import StubCatalogGateway, StubPricingGateway
from ordering.gateways.port import CatalogGateway, PricingGateway

_current_catalog: CatalogGateway | None = None
_current_pricing: PricingGateway | None = None


def get_catalog_gateway() -> CatalogGateway:
    """Return the current catalog gateway. Defaults to StubCatalogGateway."""
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = StubCatalogGateway()
    return _current_catalog


def set_catalog_gateway(gateway: CatalogGateway) -> None:
    global _current_catalog
    _current_catalog = gateway


def get_pricing_gateway() -> PricingGateway:
    """Return the current pricing gateway. Defaults to StubPricingGateway."""
    global _current_pricing
    if _current_pricing is None:
        _current_pricing = StubPricingGateway()
    return _current_pricing


def set_pricing_gateway(gateway: PricingGateway) -> None:
    global _current_pricing
    _current_pricing = gateway


def reset_gateways() -> None:
    """Reset both gateways to their defaults."""
    global _current_catalog, _current_pricing
    _current_catalog = None
    _current_pricing = None
