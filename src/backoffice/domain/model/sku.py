"""Sku aggregate: the stock ledger for one inventory item.

Each SKU knows its total quantity and, when it is sold in variations,
how that total is split between per-variation allocations and a shared
unallocated pool.

Invariants:
- ``total_qty`` is never negative.
- For varied SKUs, ``sum(allocations) + unallocated == total_qty``
  after every mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backoffice.domain.exceptions import (
    InsufficientStockError,
    InvalidStateTransitionError,
    ValidationError,
)
from backoffice.domain.model import variation
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption

DEFAULT_MIN_STOCK_LEVEL = 5


@dataclass
class VariationStock:
    """Per-variation allocations plus the shared unallocated pool."""

    allocations: dict[str, int] = field(default_factory=dict)
    unallocated: int = 0

    @property
    def allocated(self) -> int:
        return sum(self.allocations.values())

    @property
    def total(self) -> int:
        return self.allocated + self.unallocated


@dataclass
class Sku:
    """Aggregate root for an inventory item (a "part").

    The ``__init__`` accepts persisted state as-is apart from the
    conservation check; use the mutation methods for every change so the
    invariants hold.
    """

    id: str
    code: str
    name: str
    unit_price: Money
    total_qty: int = 0
    min_stock_level: int = DEFAULT_MIN_STOCK_LEVEL
    variation_schema: list[VariationOption] | None = None
    variation_stock: VariationStock | None = None
    description: str = ""
    category: str = ""
    brand: str = ""
    active: bool = True
    deleted: bool = False
    version: int = 0

    def __post_init__(self) -> None:
        if self.total_qty < 0:
            raise ValidationError("Stock quantity cannot be negative")
        if self.min_stock_level < 0:
            raise ValidationError("Minimum stock level cannot be negative")
        if not self.variation_schema:
            if self.variation_stock is not None:
                raise ValidationError(
                    f"{self.name} has variation stock but no variation schema"
                )
            self.variation_schema = None
        elif self.variation_stock is None:
            # Freshly varied SKU: everything starts in the shared pool.
            self.variation_stock = VariationStock(unallocated=self.total_qty)
        self._assert_conservation()

    # --- Queries --------------------------------------------------------------

    @property
    def has_variations(self) -> bool:
        return self.variation_schema is not None

    def available_for(self, variation_key: str = "") -> int:
        """Units a caller may draw for *variation_key*.

        A variation may use its own allocation and the shared pool.
        """
        if self.variation_stock is None:
            return self.total_qty
        stock = self.variation_stock
        return stock.allocations.get(variation_key, 0) + stock.unallocated

    def is_low_stock(self) -> bool:
        """Low-stock evaluation.

        Varied SKUs with allocations use a proportional per-bucket
        threshold of ``max(1, min_stock_level // buckets)``; anything else
        falls back to ``total_qty <= min_stock_level``.
        """
        stock = self.variation_stock
        if stock is None or not stock.allocations:
            return self.total_qty <= self.min_stock_level
        threshold = max(1, self.min_stock_level // len(stock.allocations))
        if stock.unallocated <= threshold:
            return True
        return any(qty <= threshold for qty in stock.allocations.values())

    def stock_summary(self) -> dict[str, int]:
        if self.variation_stock is None:
            return {"total": self.total_qty}
        summary = dict(self.variation_stock.allocations)
        if self.variation_stock.unallocated > 0:
            summary["unallocated"] = self.variation_stock.unallocated
        summary["total"] = self.total_qty
        return summary

    # --- Stock mutations ------------------------------------------------------

    def deduct(self, quantity: int, variation_key: str = "") -> None:
        """Permanently remove *quantity* units (checkout or approval).

        For varied SKUs the variation's own allocation is consumed before
        the shared pool, preserving the intent of manual allocation.
        """
        self._assert_live()
        if quantity <= 0:
            raise ValidationError("Deduction quantity must be positive")
        available = self.available_for(variation_key)
        if quantity > available:
            raise InsufficientStockError(
                sku_name=self.name,
                requested=quantity,
                available=available,
                variation_key=variation_key,
            )

        stock = self.variation_stock
        if stock is not None:
            own = stock.allocations.get(variation_key, 0)
            from_own = min(own, quantity)
            if variation_key in stock.allocations:
                stock.allocations[variation_key] = own - from_own
            stock.unallocated -= quantity - from_own
        self.total_qty -= quantity
        self._assert_conservation()

    def add_stock(self, quantity: int) -> None:
        """Restock.  New units land in the shared pool, never in a variation."""
        self._assert_live()
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.total_qty += quantity
        if self.variation_stock is not None:
            self.variation_stock.unallocated += quantity
        self._assert_conservation()

    def set_total_qty(self, new_qty: int) -> None:
        """Overwrite the stock count (manual stock take)."""
        self._assert_live()
        if new_qty < 0:
            raise ValidationError("Stock quantity cannot be negative")
        stock = self.variation_stock
        if stock is not None:
            unallocated = new_qty - stock.allocated
            if unallocated < 0:
                raise ValidationError(
                    f"Cannot set {self.name} stock to {new_qty}: "
                    f"{stock.allocated} units are allocated to variations, "
                    f"reallocate first"
                )
            stock.unallocated = unallocated
        self.total_qty = new_qty
        self._assert_conservation()

    def reallocate(self, allocations: dict[str, int]) -> None:
        """Replace the allocation map; the remainder becomes unallocated."""
        self._assert_live()
        if self.variation_stock is None:
            raise ValidationError(
                f"Cannot allocate stock to variations for non-varied item {self.name}"
            )
        canonical: dict[str, int] = {}
        for key, qty in allocations.items():
            if qty < 0:
                raise ValidationError(f"Allocation for '{key}' cannot be negative")
            selection = variation.parse_key(key)
            if not selection or not variation.validate(self.variation_schema, selection):
                raise ValidationError(
                    f"'{key}' is not a valid variation of {self.name}"
                )
            canonical_key = variation.build_key(selection)
            if canonical_key in canonical:
                raise ValidationError(f"Variation '{canonical_key}' is allocated twice")
            canonical[canonical_key] = qty
        allocations = canonical
        total_allocated = sum(allocations.values())
        if total_allocated > self.total_qty:
            raise ValidationError(
                f"Total allocated stock ({total_allocated}) cannot exceed "
                f"total stock ({self.total_qty})"
            )
        self.variation_stock = VariationStock(
            allocations=dict(allocations),
            unallocated=self.total_qty - total_allocated,
        )
        self._assert_conservation()

    # --- Catalog maintenance --------------------------------------------------

    def redefine_variations(
        self,
        schema: list[VariationOption] | None,
        allocations: dict[str, int] | None = None,
    ) -> None:
        """Swap the variation schema.

        Removing the schema drops variation stock.  A new schema starts
        with all stock unallocated unless *allocations* are supplied.
        """
        self._assert_live()
        if not schema:
            if allocations:
                raise ValidationError("Allocations require a variation schema")
            self.variation_schema = None
            self.variation_stock = None
            return
        self.variation_schema = list(schema)
        self.variation_stock = VariationStock(unallocated=self.total_qty)
        if allocations:
            self.reallocate(allocations)

    def update_details(
        self,
        *,
        code: str,
        name: str,
        unit_price: Money,
        min_stock_level: int,
        description: str = "",
        category: str = "",
        brand: str = "",
    ) -> None:
        self._assert_live()
        if not code or not code.strip():
            raise ValidationError("Part code is required")
        if not name or not name.strip():
            raise ValidationError("Part name is required")
        if unit_price.amount <= 0:
            raise ValidationError("Unit price must be greater than zero")
        if min_stock_level < 0:
            raise ValidationError("Minimum stock level cannot be negative")
        self.code = code.strip()
        self.name = name.strip()
        self.unit_price = unit_price
        self.min_stock_level = min_stock_level
        self.description = description
        self.category = category
        self.brand = brand

    # --- Lifecycle ------------------------------------------------------------

    def mark_deleted(self) -> None:
        if self.deleted:
            raise InvalidStateTransitionError(f"{self.name} is already deleted")
        self.deleted = True
        self.active = False

    def restore(self) -> None:
        if not self.deleted:
            raise InvalidStateTransitionError(f"{self.name} is not deleted")
        self.deleted = False
        self.active = True

    # --- Internal helpers -----------------------------------------------------

    def _assert_live(self) -> None:
        if self.deleted:
            raise InvalidStateTransitionError(f"{self.name} has been deleted")

    def _assert_conservation(self) -> None:
        stock = self.variation_stock
        if stock is None:
            return
        if stock.unallocated < 0 or any(q < 0 for q in stock.allocations.values()):
            raise ValidationError(f"Negative variation stock on {self.name}")
        if stock.total != self.total_qty:
            raise ValidationError(
                f"Variation stock for {self.name} ({stock.total}) does not "
                f"match total stock ({self.total_qty})"
            )
