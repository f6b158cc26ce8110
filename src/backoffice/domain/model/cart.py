"""Cart aggregate: a customer's basket of parts awaiting checkout.

Availability checks on the cart are advisory: nothing is held between
add-to-cart and checkout, so checkout validates stock again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model import variation
from backoffice.domain.model.value_objects import Money


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartLine:
    """One SKU/variation combination in the cart, with its price snapshot."""

    id: int
    sku_id: str
    sku_name: str
    quantity: int
    unit_price: Money  # snapshot at add time
    selected_variation: dict[str, str] = field(default_factory=dict)
    added_at: datetime = field(default_factory=_now)

    @property
    def variation_key(self) -> str:
        return variation.build_key(self.selected_variation)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def matches(self, sku_id: str, variation_key: str) -> bool:
        return self.sku_id == sku_id and self.variation_key == variation_key


@dataclass
class Cart:
    """Aggregate root for a customer's cart.

    Totals are derived from the current lines on every read, never stored.
    """

    customer_id: str
    lines: list[CartLine] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Queries --------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> Money:
        if not self.lines:
            return Money.zero()
        result = Money.zero(self.lines[0].unit_price.currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    def find_line(self, sku_id: str, selection: dict[str, str] | None) -> CartLine | None:
        key = variation.build_key(selection)
        for line in self.lines:
            if line.matches(sku_id, key):
                return line
        return None

    def get_line(self, line_id: int) -> CartLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise EntityNotFoundError(f"Cart item #{line_id} not found")

    def has_line(self, line_id: int) -> bool:
        return any(line.id == line_id for line in self.lines)

    # --- Mutations ------------------------------------------------------------

    def add_line(self, line: CartLine) -> None:
        if line.quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        self.lines.append(line)
        self._touch()

    def set_quantity(self, line_id: int, quantity: int) -> CartLine:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        line = self.get_line(line_id)
        line.quantity = quantity
        self._touch()
        return line

    def remove_line(self, line_id: int) -> None:
        line = self.get_line(line_id)
        self.lines.remove(line)
        self._touch()

    def clear(self) -> None:
        """Empty the cart after checkout; the cart itself persists."""
        self.lines.clear()
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _now()
