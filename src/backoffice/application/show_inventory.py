"""Application services: inventory queries."""

from __future__ import annotations

from backoffice.application.dto import SkuDTO, sku_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, low_stock_only: bool = False, deleted_only: bool = False) -> list[SkuDTO]:
        with self._uow as uow:
            if deleted_only:
                skus = [s for s in uow.skus.list_all(include_deleted=True) if s.deleted]
            else:
                skus = uow.skus.list_all()
            if low_stock_only:
                skus = [s for s in skus if s.is_low_stock()]
            return [sku_to_dto(s) for s in skus]


class ShowSkuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str) -> SkuDTO:
        with self._uow as uow:
            sku = uow.skus.get_by_id(sku_id)
            if sku is None or sku.deleted:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
            return sku_to_dto(sku)
