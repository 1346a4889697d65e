"""Shopping Cart aggregate — the mutable basket a customer checks out.

The cart is a standard CQRS aggregate (not event sourced). It holds at most
one line per product, consolidating quantities when the same product is
added again, and caps both distinct products and per-line quantities. Once
converted into an order it no longer accepts changes.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, ValueObject

from ordering.cart.events import CartConverted, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from ordering.domain import ordering
from ordering.exceptions import EmptyCartError, InvalidCartOperation
from ordering.shared.identifiers import CartId, CustomerId, ProductId
from ordering.shared.quantity import Quantity

MAX_DISTINCT_PRODUCTS = 20


class CartStatus(Enum):
    ACTIVE = "active"
    CONVERTED = "converted"


@dataclass(frozen=True)
class CartLine:
    """Detached snapshot of a cart line, safe to hand outside the aggregate."""

    product_id: str
    quantity: Quantity


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = ValueObject(Quantity, required=True)


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cannot_exceed_distinct_product_limit(self):
        if len(self.items) > MAX_DISTINCT_PRODUCTS:
            raise ValidationError(
                {"items": [f"Cart cannot contain more than {MAX_DISTINCT_PRODUCTS} different products"]}
            )

    @invariant.post
    def converted_cart_must_have_items(self):
        if self.status == CartStatus.CONVERTED.value and not self.items:
            raise ValidationError({"cart": ["A converted cart must contain items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id, cart_id=None):
        now = datetime.now(UTC)
        return cls(
            id=CartId.parse(cart_id) if cart_id else CartId.generate(),
            customer_id=CustomerId.parse(customer_id),
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def _find_item(self, product_id):
        return next((i for i in self.items if i.product_id == product_id), None)

    def line_items(self):
        return [CartLine(product_id=item.product_id, quantity=item.quantity) for item in self.items]

    def item_count(self) -> int:
        return len(self.items)

    def is_empty(self) -> bool:
        return not self.items

    def is_converted(self) -> bool:
        return self.status == CartStatus.CONVERTED.value

    def quantity_of(self, product_id):
        item = self._find_item(ProductId.parse(product_id))
        return item.quantity.value if item else None

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _ensure_modifiable(self):
        if self.is_converted():
            raise InvalidCartOperation({"status": ["Cannot modify a cart that has been converted to an order"]})

    def add_item(self, product_id, quantity):
        """Add a product, or top up the quantity of a product already in the cart."""
        self._ensure_modifiable()
        product_id = ProductId.parse(product_id)
        quantity = quantity if isinstance(quantity, Quantity) else Quantity(value=quantity)

        existing = self._find_item(product_id)
        if existing:
            try:
                new_quantity = existing.quantity.add(quantity)
            except ValidationError:
                raise InvalidCartOperation(
                    {
                        "quantity": [
                            f"Adding {quantity.value} to the existing {existing.quantity.value} "
                            f"would exceed the maximum quantity per product"
                        ]
                    }
                ) from None
            existing.quantity = new_quantity
        else:
            if len(self.items) >= MAX_DISTINCT_PRODUCTS:
                raise InvalidCartOperation(
                    {"items": [f"Cart cannot contain more than {MAX_DISTINCT_PRODUCTS} different products"]}
                )
            new_quantity = quantity
            self.add_items(CartItem(product_id=product_id, quantity=quantity))

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=product_id,
                quantity_added=quantity.value,
                new_quantity=new_quantity.value,
            )
        )

    def update_item_quantity(self, product_id, quantity):
        """Replace the quantity of an existing cart line."""
        self._ensure_modifiable()
        product_id = ProductId.parse(product_id)
        quantity = quantity if isinstance(quantity, Quantity) else Quantity(value=quantity)

        item = self._find_item(product_id)
        if item is None:
            raise InvalidCartOperation({"product_id": [f"Product {product_id} is not in the cart"]})

        previous_quantity = item.quantity.value
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                product_id=product_id,
                previous_quantity=previous_quantity,
                new_quantity=quantity.value,
            )
        )

    def remove_item(self, product_id):
        self._ensure_modifiable()
        product_id = ProductId.parse(product_id)

        item = self._find_item(product_id)
        if item is None:
            raise InvalidCartOperation({"product_id": [f"Product {product_id} is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=product_id))

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_as_converted(self):
        """Mark the cart as converted to an order. Repeated calls are no-ops."""
        if self.is_converted():
            return
        if self.is_empty():
            raise EmptyCartError({"cart": ["Cannot convert an empty cart to an order"]})

        now = datetime.now(UTC)
        self.status = CartStatus.CONVERTED.value
        self.updated_at = now

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items=json.dumps(
                    [{"product_id": line.product_id, "quantity": line.quantity.value} for line in self.line_items()]
                ),
                converted_at=now,
            )
        )
