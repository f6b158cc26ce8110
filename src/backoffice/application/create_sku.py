"""Application service: Create SKU use case."""

from __future__ import annotations

import logging

from backoffice.application.dto import SkuDTO, sku_to_dto
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.sku import DEFAULT_MIN_STOCK_LEVEL, Sku
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money
from backoffice.domain.model.variation import VariationOption
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CreateSkuHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        code: str,
        name: str,
        unit_price: str,
        total_qty: int = 0,
        min_stock_level: int = DEFAULT_MIN_STOCK_LEVEL,
        variations: list[VariationOption] | None = None,
        allocations: dict[str, int] | None = None,
        description: str = "",
        category: str = "",
        brand: str = "",
    ) -> SkuDTO:
        """Add a new part to the catalog.

        Varied parts start with all stock unallocated unless initial
        allocations are given.
        """
        if not code or not code.strip():
            raise ValidationError("Part code is required")
        if not name or not name.strip():
            raise ValidationError("Part name is required")
        price = Money.of(unit_price, self._currency)
        if price.amount <= 0:
            raise ValidationError("Unit price must be greater than zero")
        if allocations and not variations:
            raise ValidationError("Allocations require a variation schema")

        with self._uow as uow:
            # Tombstoned SKUs keep their code and name reserved.
            if uow.skus.get_by_code(code.strip()) is not None:
                raise ValidationError(f"Part code already exists: {code.strip()}")
            if uow.skus.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Part '{name.strip()}' already exists")

            sku = Sku(
                id=uow.skus.next_id(),
                code=code.strip(),
                name=name.strip(),
                unit_price=price,
                total_qty=total_qty,
                min_stock_level=min_stock_level,
                variation_schema=list(variations) if variations else None,
                description=description,
                category=category,
                brand=brand,
            )
            if allocations:
                sku.reallocate(allocations)

            uow.skus.save(sku)
            uow.commit()

        logger.info("Created part %s (%s) with %d in stock", sku.name, sku.code, sku.total_qty)
        return sku_to_dto(sku)
