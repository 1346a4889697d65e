"""Typed identifier kinds for the Ordering domain.

Identifiers are plain strings once parsed, so they persist in Protean
``Identifier`` fields and compare by value. Each kind knows how to validate
and normalise its own raw input: UUID-backed kinds are lower-cased, string
kinds are trimmed.
"""

import re
from dataclasses import dataclass
from uuid import uuid4

from protean.exceptions import ValidationError

_UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


@dataclass(frozen=True)
class IdentifierKind:
    """A named identifier type sharing the parse/generate contract."""

    name: str
    field: str
    uuid_backed: bool = False

    def parse(self, raw) -> str:
        """Validate ``raw`` and return its normalised string form."""
        if raw is None:
            raise ValidationError({self.field: [f"{self.name} cannot be empty"]})

        value = str(raw).strip()
        if not value:
            raise ValidationError({self.field: [f"{self.name} cannot be empty"]})

        if self.uuid_backed:
            if not _UUID_PATTERN.match(value):
                raise ValidationError({self.field: [f"{self.name} must be a valid UUID, got '{value}'"]})
            return value.lower()

        return value

    def generate(self) -> str:
        if not self.uuid_backed:
            raise TypeError(f"{self.name} values are assigned externally and cannot be generated")
        return str(uuid4())

    def is_valid(self, raw) -> bool:
        try:
            self.parse(raw)
        except ValidationError:
            return False
        return True


CartId = IdentifierKind("CartId", "cart_id", uuid_backed=True)
OrderId = IdentifierKind("OrderId", "order_id", uuid_backed=True)
EventId = IdentifierKind("EventId", "event_id", uuid_backed=True)
CustomerId = IdentifierKind("CustomerId", "customer_id")
ProductId = IdentifierKind("ProductId", "product_id")
PaymentId = IdentifierKind("PaymentId", "payment_id")
ReservationId = IdentifierKind("ReservationId", "reservation_id")
