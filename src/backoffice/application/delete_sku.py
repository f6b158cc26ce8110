"""Application services: soft delete and restore.

Deletion is a tombstone transition on the SKU, saved through the same
versioned path as stock mutations so it cannot interleave with an
in-flight deduction.  History (orders, requests) keeps pointing at the
SKU's ID.
"""

from __future__ import annotations

import logging

from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SoftDeleteSkuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str) -> None:
        with self._uow as uow:
            sku = uow.skus.get_by_id(sku_id)
            if sku is None or sku.deleted:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
            sku.mark_deleted()
            uow.skus.save(sku)
            uow.commit()

        logger.info("Part %s (%s) soft deleted", sku.name, sku.id)


class RestoreSkuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str) -> None:
        with self._uow as uow:
            sku = uow.skus.get_by_id(sku_id)
            if sku is None:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
            sku.restore()
            uow.skus.save(sku)
            uow.commit()

        logger.info("Part %s (%s) restored", sku.name, sku.id)
