"""Application service: Update SKU use case.

Updates catalog details and, optionally, the variation schema.  Stock
levels are edited through the dedicated stock use cases.
"""

from __future__ import annotations

from backoffice.application.dto import SkuDTO, sku_to_dto
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption
from backoffice.domain.repository.unit_of_work import UnitOfWork


class UpdateSkuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        sku_id: str,
        *,
        code: str | None = None,
        name: str | None = None,
        unit_price: str | None = None,
        min_stock_level: int | None = None,
        description: str | None = None,
        category: str | None = None,
        brand: str | None = None,
        variations: list[VariationOption] | None = None,
        clear_variations: bool = False,
        allocations: dict[str, int] | None = None,
    ) -> SkuDTO:
        """Change the given fields; ``None`` keeps the current value.

        A new variation schema starts fully unallocated unless
        allocations are supplied; allocations alone reallocate the
        existing schema.  Existing orders keep their price snapshots.
        """
        if variations and clear_variations:
            raise ValidationError("Cannot replace and clear variations at once")

        with self._uow as uow:
            sku = uow.skus.get_by_id(sku_id)
            if sku is None or sku.deleted:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")

            if code is not None:
                clash = uow.skus.get_by_code(code.strip())
                if clash is not None and clash.id != sku.id:
                    raise ValidationError(f"Part code already exists: {code.strip()}")
            if name is not None:
                clash = uow.skus.get_by_name(name.strip())
                if clash is not None and clash.id != sku.id:
                    raise ValidationError(f"Part '{name.strip()}' already exists")

            sku.update_details(
                code=code if code is not None else sku.code,
                name=name if name is not None else sku.name,
                unit_price=(
                    Money.of(unit_price, sku.unit_price.currency)
                    if unit_price is not None
                    else sku.unit_price
                ),
                min_stock_level=(
                    min_stock_level if min_stock_level is not None else sku.min_stock_level
                ),
                description=description if description is not None else sku.description,
                category=category if category is not None else sku.category,
                brand=brand if brand is not None else sku.brand,
            )

            if clear_variations:
                sku.redefine_variations(None, allocations)
            elif variations and list(variations) != sku.variation_schema:
                sku.redefine_variations(list(variations), allocations)
            elif allocations:
                sku.reallocate(allocations)

            uow.skus.save(sku)
            uow.commit()

        return sku_to_dto(sku)
