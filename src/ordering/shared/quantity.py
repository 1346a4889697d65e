"""Quantity value object — how many units of a product, between 1 and 10."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer

from ordering.domain import ordering

MIN_QUANTITY = 1
MAX_QUANTITY = 10


@ordering.value_object
class Quantity:
    value = Integer(required=True)

    @invariant.post
    def value_must_be_within_limits(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError({"quantity": ["Quantity must be an integer"]})
        if not MIN_QUANTITY <= self.value <= MAX_QUANTITY:
            raise ValidationError(
                {"quantity": [f"Quantity must be an integer between {MIN_QUANTITY} and {MAX_QUANTITY}"]}
            )

    def add(self, other):
        """Return a new Quantity holding the sum; fails above the ceiling."""
        other_value = getattr(other, "value", other)
        return Quantity(value=self.value + other_value)

    def __int__(self):
        return self.value
