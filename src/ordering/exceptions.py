"""Error taxonomy for the Ordering domain.

Every domain failure is a Protean ``ValidationError`` carrying a
``{field: [messages]}`` payload, so generic handlers keep treating them as
validation failures. The subclasses let callers tell the categories apart.
"""

from protean.exceptions import ValidationError


class CurrencyMismatch(ValidationError):
    """Arithmetic or comparison across two different currencies."""


class NegativeMoney(ValidationError):
    """A monetary operation would produce a negative amount."""


class InvalidCartOperation(ValidationError):
    """Cart limits exceeded, product absent, or cart already converted."""


class EmptyCartError(ValidationError):
    """An empty cart cannot be converted or checked out."""


class InvalidOrderStateTransition(ValidationError):
    """The requested transition is not legal from the order's current state."""
