"""Application service: Submit Receipt use case."""

from __future__ import annotations

import logging

from backoffice.application.dto import OrderDTO, order_to_dto, schemas_for
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from backoffice.domain.model.order import Receipt
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SubmitReceiptHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        customer_id: str,
        order_id: int,
        file_url: str,
        amount: str | None = None,
        notes: str = "",
    ) -> OrderDTO:
        if not file_url or not file_url.strip():
            raise ValidationError("Receipt file is required")

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            if order.customer_id != customer_id:
                raise NotAuthorizedError(f"Order #{order_id} belongs to another customer")

            currency = order.total.currency
            order.submit_receipt(
                Receipt(
                    file_url=file_url.strip(),
                    amount=Money.of(amount, currency) if amount is not None else None,
                    notes=notes,
                )
            )
            uow.orders.save(order)
            uow.commit()
            schemas = schemas_for(uow.skus, (line.sku_id for line in order.lines))

        logger.info("Receipt submitted for order #%s", order_id)
        return order_to_dto(order, schemas)
