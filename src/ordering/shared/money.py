"""Money value object for monetary amounts with currency."""

import re
from decimal import ROUND_HALF_UP, Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from ordering.domain import ordering
from ordering.exceptions import CurrencyMismatch, NegativeMoney

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
_CENTS = Decimal("0.01")


def to_cents(amount) -> Decimal:
    """Round an amount to two decimal places, half-up."""
    return Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)


@ordering.value_object
class Money:
    """Non-negative monetary amount in a single ISO-4217 currency.

    Amounts are held rounded to cents. Arithmetic is done in ``Decimal`` and
    only between values of the same currency.
    """

    amount = Float(min_value=0.0, default=0.0)
    currency = String(max_length=3, default="USD")

    @invariant.post
    def currency_must_be_iso_4217_code(self):
        if not self.currency or not _CURRENCY_PATTERN.match(self.currency):
            raise ValidationError({"currency": [f"Currency must be a 3-letter ISO-4217 code, got '{self.currency}'"]})

    @classmethod
    def of(cls, amount, currency="USD"):
        return cls(amount=float(to_cents(amount)), currency=currency)

    @classmethod
    def zero(cls, currency="USD"):
        return cls(amount=0.0, currency=currency)

    @property
    def cents(self) -> Decimal:
        return to_cents(self.amount)

    def _ensure_same_currency(self, other, operation):
        if self.currency != other.currency:
            raise CurrencyMismatch(
                {"currency": [f"Cannot {operation} {other.currency} and {self.currency} amounts"]}
            )

    def add(self, other):
        self._ensure_same_currency(other, "add")
        return Money(amount=float(self.cents + other.cents), currency=self.currency)

    def subtract(self, other):
        self._ensure_same_currency(other, "subtract")
        result = self.cents - other.cents
        if result < 0:
            raise NegativeMoney(
                {"amount": [f"Subtracting {other.cents} from {self.cents} {self.currency} would be negative"]}
            )
        return Money(amount=float(result), currency=self.currency)

    def multiply(self, factor):
        """Multiply by a whole quantity (an ``int`` or a ``Quantity``)."""
        factor = getattr(factor, "value", factor)
        if not isinstance(factor, int) or factor < 0:
            raise ValidationError({"amount": ["Money can only be multiplied by a non-negative whole quantity"]})
        return Money(amount=float(to_cents(self.cents * factor)), currency=self.currency)

    def is_zero(self) -> bool:
        return self.cents == 0

    def same_as(self, other) -> bool:
        """Value equality tolerant of float representation."""
        return self.currency == other.currency and self.cents == other.cents

    def __str__(self):
        return f"{self.cents} {self.currency}"
