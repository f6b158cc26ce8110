"""Application services: stock level edits.

``UpdateStockHandler`` overwrites the count after a stock take,
``RestockHandler`` adds received goods.  Both go through the versioned
SKU save inside a unit of work, like every other stock mutation.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import SkuDTO, sku_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.sku import Sku
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _load(uow: UnitOfWork, sku_id: str) -> Sku:
    sku = uow.skus.get_by_id(sku_id)
    if sku is None or sku.deleted:
        raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
    return sku


class UpdateStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str, new_qty: int) -> SkuDTO:
        with self._uow as uow:
            sku = _load(uow, sku_id)
            old_qty = sku.total_qty
            sku.set_total_qty(new_qty)
            uow.skus.save(sku)
            uow.commit()

        logger.info("Stock for %s set from %d to %d", sku.name, old_qty, new_qty)
        return sku_to_dto(sku)


class RestockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str, quantity: int) -> SkuDTO:
        with self._uow as uow:
            sku = _load(uow, sku_id)
            sku.add_stock(quantity)
            uow.skus.save(sku)
            uow.commit()

        logger.info("Restocked %s with %d (now %d)", sku.name, quantity, sku.total_qty)
        return sku_to_dto(sku)
