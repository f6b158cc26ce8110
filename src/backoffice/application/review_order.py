"""Application services: admin review of order payments.

Approval and rejection only move the order through its payment states.
Stock was deducted at checkout and is never touched here.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import OrderDTO, order_to_dto, schemas_for
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.order import Order
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _load(uow: UnitOfWork, order_id: int) -> Order:
    order = uow.orders.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


class ApproveOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, admin_id: str) -> OrderDTO:
        with self._uow as uow:
            order = _load(uow, order_id)
            order.approve(admin_id)
            uow.orders.save(order)
            uow.commit()
            schemas = schemas_for(uow.skus, (line.sku_id for line in order.lines))

        logger.info("Order #%s approved by %s", order_id, admin_id)
        return order_to_dto(order, schemas)


class RejectOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, admin_id: str, reason: str) -> OrderDTO:
        with self._uow as uow:
            order = _load(uow, order_id)
            order.reject(admin_id, reason)
            uow.orders.save(order)
            uow.commit()
            schemas = schemas_for(uow.skus, (line.sku_id for line in order.lines))

        logger.warning("Order #%s payment rejected by %s: %s", order_id, admin_id, reason)
        return order_to_dto(order, schemas)
