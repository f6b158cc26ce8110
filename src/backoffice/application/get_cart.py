"""Application service: Get Cart use case (query)."""

from __future__ import annotations

from backoffice.application.dto import CartDTO, cart_to_dto, schemas_for
from backoffice.domain.model.cart import Cart
from backoffice.domain.repository.unit_of_work import UnitOfWork


class GetCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str) -> CartDTO:
        """Return the customer's cart, empty if they never added anything.

        Reading never creates the cart on disk; the first add does.
        """
        with self._uow as uow:
            cart = uow.carts.get_for_customer(customer_id) or Cart(customer_id=customer_id)
            schemas = schemas_for(uow.skus, (line.sku_id for line in cart.lines))
            return cart_to_dto(cart, schemas)
