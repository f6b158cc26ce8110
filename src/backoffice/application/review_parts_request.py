"""Application services: admin review of parts requests.

Approval re-checks availability at approval time and deducts in the
same unit of work that flips the request to APPROVED.  If stock has run
out since the request was filed, nothing is written and the request
stays PENDING.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import PartsRequestDTO, request_to_dto
from backoffice.domain.exceptions import EntityNotFoundError, InsufficientStockError
from backoffice.domain.model.parts_request import PartsRequest
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.stock_ledger import StockDraw, StockLedger

logger = logging.getLogger(__name__)


def _load(uow: UnitOfWork, request_id: int) -> PartsRequest:
    request = uow.parts_requests.get_by_id(request_id)
    if request is None:
        raise EntityNotFoundError(f"Parts request #{request_id} not found")
    return request


class ApprovePartsRequestHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, request_id: int, admin_id: str) -> PartsRequestDTO:
        with self._uow as uow:
            request = _load(uow, request_id)
            request.ensure_pending("approved")

            ledger = StockLedger(uow.skus)
            try:
                touched = ledger.deduct_lines(
                    [
                        StockDraw(
                            request.sku_id,
                            request.quantity.value,
                            dict(request.selected_variation),
                        )
                    ]
                )
            except InsufficientStockError:
                logger.warning(
                    "Parts request #%s left pending: not enough %s",
                    request_id, request.sku_name,
                )
                raise

            sku = touched[request.sku_id]
            request.approve(admin_id, sku.unit_price)
            uow.parts_requests.save(request)
            uow.commit()

        logger.info(
            "Parts request #%s approved by %s: %d x %s deducted",
            request_id, admin_id, request.quantity.value, request.sku_name,
        )
        return request_to_dto(request, {sku.id: sku.variation_schema})


class RejectPartsRequestHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, request_id: int, admin_id: str) -> PartsRequestDTO:
        with self._uow as uow:
            request = _load(uow, request_id)
            request.reject(admin_id)
            uow.parts_requests.save(request)
            uow.commit()
            sku = uow.skus.get_by_id(request.sku_id)

        logger.info("Parts request #%s rejected by %s", request_id, admin_id)
        return request_to_dto(
            request, {request.sku_id: sku.variation_schema if sku else None}
        )
