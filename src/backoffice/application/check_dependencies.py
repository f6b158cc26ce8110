"""Application service: Check Dependencies use case (query).

Reports how much history references a SKU.  The system always soft
deletes, so this is informational.
"""

from __future__ import annotations

from backoffice.application.dto import DependencyDTO
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork


class CheckDependenciesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sku_id: str) -> DependencyDTO:
        with self._uow as uow:
            if uow.skus.get_by_id(sku_id) is None:
                raise EntityNotFoundError(f"Part with ID '{sku_id}' not found")
            return DependencyDTO(
                order_lines=uow.orders.count_lines_for_sku(sku_id),
                cart_lines=uow.carts.count_lines_for_sku(sku_id),
                parts_requests=uow.parts_requests.count_for_sku(sku_id),
            )
