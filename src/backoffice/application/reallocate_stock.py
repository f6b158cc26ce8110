"""Application service: Reallocate Stock use case."""

from __future__ import annotations

from backoffice.application.dto import SkuDTO, sku_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ReallocateStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str, allocations: dict[str, int]) -> SkuDTO:
        """Split a varied part's stock across its variations.

        Whatever is not allocated goes back to the shared pool.
        """
        with self._uow as uow:
            sku = uow.skus.get_by_id(sku_id)
            if sku is None or sku.deleted:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
            sku.reallocate(allocations)
            uow.skus.save(sku)
            uow.commit()
        return sku_to_dto(sku)
