"""Application services: order queries."""

from __future__ import annotations

from backoffice.application.dto import OrderDTO, order_to_dto, schemas_for
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            schemas = schemas_for(uow.skus, (line.sku_id for line in order.lines))
            return order_to_dto(order, schemas)


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str | None = None) -> list[OrderDTO]:
        """Orders, newest first.  Without a customer, every order (admin view)."""
        with self._uow as uow:
            orders = uow.orders.list_all(customer_id)
            schemas = schemas_for(
                uow.skus, (line.sku_id for order in orders for line in order.lines)
            )
            return [order_to_dto(order, schemas) for order in orders]
