"""Order aggregate — the immutable record of a checked-out cart.

The Order is a standard CQRS aggregate. Its line items, address and totals
are fixed at creation; afterwards only the lifecycle moves forward:

State Machine:
    AWAITING_PAYMENT → PAID → STOCK_RESERVED
    CANCELLED (from AWAITING_PAYMENT, PAID) — terminal

Payment and stock-reservation messages may be delivered more than once, so
the order remembers which payment and reservation ids it has already
applied. A repeated id is a silent no-op; a different id arriving after the
transition is a conflict.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, Text, ValueObject

from ordering.domain import ordering
from ordering.exceptions import CurrencyMismatch, InvalidOrderStateTransition, NegativeMoney
from ordering.order.events import OrderCancelled, OrderPaid, OrderPlaced, OrderStockReserved
from ordering.shared.identifiers import CartId, CustomerId, EventId, OrderId, PaymentId, ProductId, ReservationId
from ordering.shared.money import Money
from ordering.shared.quantity import Quantity


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    PAID = "PAID"
    STOCK_RESERVED = "STOCK_RESERVED"
    CANCELLED = "CANCELLED"


_CANCELLABLE_STATES = {OrderStatus.AWAITING_PAYMENT.value, OrderStatus.PAID.value}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address captured at checkout.

    Once recorded on an Order the address never changes, regardless of later
    changes to the customer's address book.
    """

    street = String(required=True, max_length=200)
    address_line2 = String(max_length=200)
    city = String(required=True, max_length=100)
    state_or_province = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, min_length=2, max_length=100)
    delivery_instructions = String(max_length=500)

    @invariant.post
    def required_fields_must_not_be_blank(self):
        for field_name in ("street", "city", "state_or_province", "postal_code", "country"):
            value = getattr(self, field_name)
            if value is None or not value.strip():
                raise ValidationError({field_name: [f"{field_name} cannot be empty"]})

    @classmethod
    def from_dict(cls, data):
        """Build an address from raw input, trimming every value."""
        data = data or {}

        def _clean(key):
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return cls(
            street=_clean("street"),
            address_line2=_clean("address_line2"),
            city=_clean("city"),
            state_or_province=_clean("state_or_province"),
            postal_code=_clean("postal_code"),
            country=_clean("country"),
            delivery_instructions=_clean("delivery_instructions"),
        )


@ordering.value_object(part_of="Order")
class ProductSnapshot:
    """Product details as they were when the order was priced."""

    name = String(required=True, max_length=200)
    description = String(required=True, max_length=1000)
    sku = String(required=True, max_length=50)

    @invariant.post
    def fields_must_not_be_blank(self):
        for field_name in ("name", "description", "sku"):
            value = getattr(self, field_name)
            if value is None or not value.strip():
                raise ValidationError({field_name: [f"Product {field_name} cannot be empty"]})

    @classmethod
    def capture(cls, name, description, sku):
        return cls(
            name=(name or "").strip() or None,
            description=(description or "").strip() or None,
            sku=(sku or "").strip() or None,
        )


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A priced line of an order. Fixed once the order is created."""

    product_id = Identifier(required=True)
    product = ValueObject(ProductSnapshot, required=True)
    quantity = ValueObject(Quantity, required=True)
    unit_price = ValueObject(Money, required=True)
    item_discount = ValueObject(Money)

    @classmethod
    def build(cls, product_id, product, quantity, unit_price, item_discount=None):
        """Create a line, validating currency consistency and a non-negative total."""
        quantity = quantity if isinstance(quantity, Quantity) else Quantity(value=quantity)
        item_discount = item_discount or Money.zero(unit_price.currency)

        if item_discount.currency != unit_price.currency:
            raise CurrencyMismatch(
                {"item_discount": ["Item discount must use the same currency as the unit price"]}
            )

        gross = unit_price.multiply(quantity)
        if item_discount.cents > gross.cents:
            raise NegativeMoney(
                {"item_discount": [f"Item discount {item_discount} exceeds the line amount {gross}"]}
            )

        return cls(
            product_id=ProductId.parse(product_id),
            product=product,
            quantity=quantity,
            unit_price=unit_price,
            item_discount=item_discount,
        )

    def line_total(self) -> Money:
        return self.unit_price.multiply(self.quantity).subtract(self.discount())

    def discount(self) -> Money:
        return self.item_discount or Money.zero(self.unit_price.currency)

    def to_dict_summary(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product.name,
            "sku": self.product.sku,
            "quantity": self.quantity.value,
            "unit_price": self.unit_price.amount,
            "item_discount": self.discount().amount,
            "line_total": self.line_total().amount,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress, required=True)
    status = String(
        max_length=50,
        choices=OrderStatus,
        default=OrderStatus.AWAITING_PAYMENT.value,
    )
    order_level_discount = ValueObject(Money)
    total_amount = ValueObject(Money, required=True)
    payment_id = Identifier()
    reservation_id = Identifier()
    cancellation_reason = String(max_length=500)
    processed_payment_ids = Text(default="[]")  # JSON array of applied payment ids
    processed_reservation_ids = Text(default="[]")  # JSON array of applied reservation ids
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_must_share_total_currency(self):
        if self.order_level_discount and self.total_amount:
            if self.order_level_discount.currency != self.total_amount.currency:
                raise ValidationError(
                    {"order_level_discount": ["Order level discount must use the same currency as the order total"]}
                )

    @invariant.post
    def paid_order_must_reference_payment(self):
        if self.status in (OrderStatus.PAID.value, OrderStatus.STOCK_RESERVED.value) and not self.payment_id:
            raise ValidationError({"payment_id": ["A paid order must reference its payment"]})

    @invariant.post
    def reserved_order_must_reference_reservation(self):
        if self.status == OrderStatus.STOCK_RESERVED.value and not self.reservation_id:
            raise ValidationError({"reservation_id": ["A stock-reserved order must reference its reservation"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id,
        cart_id,
        customer_id,
        items,
        shipping_address,
        order_level_discount,
        total_amount,
    ):
        """Create a new order awaiting payment.

        Args:
            order_id: Identity for the new order (an ``OrderId``).
            cart_id: The cart this order was checked out from.
            customer_id: The customer placing the order.
            items: Non-empty list of ``OrderItem``.
            shipping_address: ``ShippingAddress`` value object.
            order_level_discount: ``Money`` discount applied to the whole order.
            total_amount: ``Money`` that must equal the sum of line totals
                minus the order level discount.
        """
        items = list(items or [])
        if not items:
            raise ValidationError({"items": ["Order must have at least one item"]})

        currency = total_amount.currency
        if any(item.unit_price.currency != currency or item.discount().currency != currency for item in items):
            raise CurrencyMismatch({"items": ["All order items must use the same currency as the order total"]})

        order_level_discount = order_level_discount or Money.zero(currency)
        if order_level_discount.currency != currency:
            raise CurrencyMismatch(
                {"order_level_discount": ["Order level discount must use the same currency as the order total"]}
            )

        subtotal = Money.zero(currency)
        for item in items:
            subtotal = subtotal.add(item.line_total())
        expected_total = subtotal.subtract(order_level_discount)
        if not expected_total.same_as(total_amount):
            raise ValidationError(
                {
                    "total_amount": [
                        f"Order total {total_amount} does not match items total {subtotal} "
                        f"minus discount {order_level_discount}"
                    ]
                }
            )

        now = datetime.now(UTC)
        order = cls(
            id=OrderId.parse(order_id),
            cart_id=CartId.parse(cart_id),
            customer_id=CustomerId.parse(customer_id),
            items=items,
            shipping_address=shipping_address,
            status=OrderStatus.AWAITING_PAYMENT.value,
            order_level_discount=order_level_discount,
            total_amount=total_amount,
            processed_payment_ids=json.dumps([]),
            processed_reservation_ids=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                event_id=EventId.generate(),
                order_id=str(order.id),
                customer_id=str(order.customer_id),
                cart_id=str(order.cart_id),
                items=json.dumps([item.to_dict_summary() for item in items]),
                total_amount=total_amount.amount,
                currency=currency,
                shipping_address=json.dumps(shipping_address.to_dict()),
                occurred_at=now,
            )
        )

        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def can_be_paid(self) -> bool:
        return self.status == OrderStatus.AWAITING_PAYMENT.value

    def can_reserve_stock(self) -> bool:
        return self.status == OrderStatus.PAID.value

    def can_be_cancelled(self) -> bool:
        return self.status in _CANCELLABLE_STATES

    def _processed(self, field_name) -> list:
        raw = getattr(self, field_name)
        return json.loads(raw) if raw else []

    def has_processed_payment(self, payment_id) -> bool:
        return str(payment_id).strip() in self._processed("processed_payment_ids")

    def has_processed_reservation(self, reservation_id) -> bool:
        return str(reservation_id).strip() in self._processed("processed_reservation_ids")

    def subtotal(self) -> Money:
        total = Money.zero(self.total_amount.currency)
        for item in self.items:
            total = total.add(item.line_total())
        return total

    def item_count(self) -> int:
        return len(self.items)

    def domain_events(self) -> list:
        """Pending domain events, as a copy the caller may keep."""
        return list(self._events)

    def clear_domain_events(self) -> None:
        self._events.clear()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_as_paid(self, payment_id) -> bool:
        """Record approved payment.

        Returns False when this payment id was already applied, True when the
        order transitioned to PAID.
        """
        payment_id = PaymentId.parse(payment_id)
        if self.has_processed_payment(payment_id):
            return False

        if not self.can_be_paid():
            raise InvalidOrderStateTransition(
                {"status": [f"Cannot mark order as paid: order is in {self.status} state"]}
            )

        processed = self._processed("processed_payment_ids")
        processed.append(payment_id)
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = OrderStatus.PAID.value
            self.payment_id = payment_id
            self.processed_payment_ids = json.dumps(processed)
            self.updated_at = now

        self.raise_(
            OrderPaid(
                event_id=EventId.generate(),
                order_id=str(self.id),
                payment_id=payment_id,
                occurred_at=now,
            )
        )
        return True

    def reserve_stock(self, reservation_id) -> bool:
        """Record a stock reservation for a paid order.

        Returns False when this reservation id was already applied.
        """
        reservation_id = ReservationId.parse(reservation_id)
        if self.has_processed_reservation(reservation_id):
            return False

        if not self.can_reserve_stock():
            raise InvalidOrderStateTransition(
                {"status": [f"Cannot reserve stock: order is in {self.status} state"]}
            )

        processed = self._processed("processed_reservation_ids")
        processed.append(reservation_id)
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = OrderStatus.STOCK_RESERVED.value
            self.reservation_id = reservation_id
            self.processed_reservation_ids = json.dumps(processed)
            self.updated_at = now

        self.raise_(
            OrderStockReserved(
                event_id=EventId.generate(),
                order_id=str(self.id),
                reservation_id=reservation_id,
                occurred_at=now,
            )
        )
        return True

    def cancel(self, reason):
        """Cancel an order that is awaiting payment or paid. The payment id is kept."""
        if not self.can_be_cancelled():
            raise InvalidOrderStateTransition(
                {"status": [f"Cannot cancel order: order is in {self.status} state"]}
            )

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": ["Cancellation reason cannot be empty"]})

        previous_state = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancellation_reason = reason
            self.updated_at = now

        self.raise_(
            OrderCancelled(
                event_id=EventId.generate(),
                order_id=str(self.id),
                reason=reason,
                previous_state=previous_state,
                occurred_at=now,
            )
        )
