"""Tests for ShippingAddress and ProductSnapshot value objects."""

import pytest
from ordering.order.order import ProductSnapshot, ShippingAddress
from protean.exceptions import ValidationError


class TestShippingAddress:
    def test_from_dict_trims_values(self, shipping_address_data):
        data = {key: f"  {value}  " for key, value in shipping_address_data.items()}
        address = ShippingAddress.from_dict(data)
        assert address.street == "123 Main St"
        assert address.address_line2 == "Apt 4B"
        assert address.country == "US"

    def test_optional_fields_may_be_absent(self):
        address = ShippingAddress.from_dict(
            {
                "street": "1 Elm St",
                "city": "Portland",
                "state_or_province": "OR",
                "postal_code": "97201",
                "country": "US",
            }
        )
        assert address.address_line2 is None
        assert address.delivery_instructions is None

    @pytest.mark.parametrize("field", ["street", "city", "state_or_province", "postal_code", "country"])
    def test_required_fields_cannot_be_blank(self, shipping_address_data, field):
        data = {**shipping_address_data, field: "   "}
        with pytest.raises(ValidationError) as exc:
            ShippingAddress.from_dict(data)
        assert field in exc.value.messages

    def test_street_length_limit(self, shipping_address_data):
        with pytest.raises(ValidationError):
            ShippingAddress.from_dict({**shipping_address_data, "street": "x" * 201})

    def test_postal_code_length_limit(self, shipping_address_data):
        with pytest.raises(ValidationError):
            ShippingAddress.from_dict({**shipping_address_data, "postal_code": "1" * 21})

    def test_country_needs_two_characters(self, shipping_address_data):
        with pytest.raises(ValidationError):
            ShippingAddress.from_dict({**shipping_address_data, "country": "U"})

    def test_delivery_instructions_length_limit(self, shipping_address_data):
        with pytest.raises(ValidationError):
            ShippingAddress.from_dict({**shipping_address_data, "delivery_instructions": "x" * 501})

    def test_equal_by_value(self, shipping_address_data):
        assert ShippingAddress.from_dict(shipping_address_data) == ShippingAddress.from_dict(shipping_address_data)


class TestProductSnapshot:
    def test_capture_trims(self):
        snapshot = ProductSnapshot.capture("  Earl Grey Tea ", " Classic black tea ", " TEA-EARL-001 ")
        assert snapshot.name == "Earl Grey Tea"
        assert snapshot.description == "Classic black tea"
        assert snapshot.sku == "TEA-EARL-001"

    @pytest.mark.parametrize(
        "name,description,sku",
        [
            ("", "desc", "SKU"),
            ("Name", "   ", "SKU"),
            ("Name", "desc", ""),
        ],
    )
    def test_blank_fields_rejected(self, name, description, sku):
        with pytest.raises(ValidationError):
            ProductSnapshot.capture(name, description, sku)

    def test_length_limits(self):
        with pytest.raises(ValidationError):
            ProductSnapshot.capture("n" * 201, "desc", "SKU")
        with pytest.raises(ValidationError):
            ProductSnapshot.capture("Name", "d" * 1001, "SKU")
        with pytest.raises(ValidationError):
            ProductSnapshot.capture("Name", "desc", "S" * 51)
