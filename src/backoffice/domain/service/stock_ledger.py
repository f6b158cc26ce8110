"""Domain service: Stock Ledger.

Cart additions, checkout and parts-request approval all check and draw
stock through this service, so the availability rules live in one place.

Multi-line draws use a two-phase approach (validate-then-persist): every
deduction is applied to the loaded aggregates first, and only when all
of them succeed is anything saved.  Combined with the unit of work this
guarantees checkout never leaves a partial deduction behind.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidVariationSelectionError,
)
from backoffice.domain.model import variation
from backoffice.domain.model.sku import Sku
from backoffice.domain.repository.sku_repository import SkuRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockDraw:
    """One line of stock to take: which SKU, which variation, how many."""

    sku_id: str
    quantity: int
    selection: dict[str, str] = field(default_factory=dict)


class StockLedger:

    def __init__(self, sku_repo: SkuRepository) -> None:
        self._sku_repo = sku_repo

    def get_live_sku(self, sku_id: str) -> Sku:
        """Load a SKU that can still be sold or drawn."""
        sku = self._sku_repo.get_by_id(sku_id)
        if sku is None or sku.deleted or not sku.active:
            raise EntityNotFoundError(f"Part not found: '{sku_id}'")
        return sku

    @staticmethod
    def check_selection(sku: Sku, selection: Mapping[str, str] | None) -> str:
        """Validate *selection* for *sku* and return its canonical key."""
        if sku.has_variations and not selection:
            raise InvalidVariationSelectionError(
                f"Variation selection is required for {sku.name}"
            )
        if not variation.validate(sku.variation_schema, selection):
            raise InvalidVariationSelectionError(
                f"Invalid variation selection for {sku.name}: "
                f"{variation.build_key(selection) or 'none'}"
            )
        return variation.build_key(selection)

    def ensure_available(
        self,
        sku: Sku,
        selection: Mapping[str, str] | None,
        quantity: int,
    ) -> str:
        """Advisory check: raise unless *quantity* could be drawn right now."""
        key = self.check_selection(sku, selection)
        available = sku.available_for(key)
        if quantity > available:
            logger.warning(
                "Stock check failed for %s [%s]: requested %d, available %d",
                sku.name, key, quantity, available,
            )
            raise InsufficientStockError(
                sku_name=sku.name,
                requested=quantity,
                available=available,
                variation_key=key,
            )
        return key

    def deduct_lines(self, draws: Sequence[StockDraw]) -> dict[str, Sku]:
        """Deduct every draw, or nothing.

        Phase 1: load each SKU once and apply the draws in memory.  Draws
                 on the same SKU see each other's effect, so two variations
                 competing for the shared pool are judged together.
        Phase 2: persist the touched SKUs.

        Returns the updated SKUs keyed by ID (useful for price snapshots).
        """
        # Phase 1: load and apply in memory
        touched: dict[str, Sku] = {}
        for draw in draws:
            sku = touched.get(draw.sku_id) or self.get_live_sku(draw.sku_id)
            touched[sku.id] = sku
            key = self.check_selection(sku, draw.selection)
            sku.deduct(draw.quantity, key)

        # Phase 2: persist
        for sku in touched.values():
            self._sku_repo.save(sku)
            logger.info(
                "Stock for %s now %d%s",
                sku.name, sku.total_qty, " (low)" if sku.is_low_stock() else "",
            )
        return touched
