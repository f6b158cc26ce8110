"""Application services: change or remove a cart line."""

from __future__ import annotations

from backoffice.application.dto import CartDTO, cart_to_dto, schemas_for
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from backoffice.domain.model.cart import Cart
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.stock_ledger import StockLedger


def _owned_cart(uow: UnitOfWork, customer_id: str, line_id: int) -> Cart:
    """Return the caller's cart, provided it holds *line_id*."""
    cart = uow.carts.get_for_customer(customer_id)
    if cart is not None and cart.has_line(line_id):
        return cart
    if uow.carts.find_by_line_id(line_id) is not None:
        raise NotAuthorizedError(f"Cart item #{line_id} belongs to another customer")
    raise EntityNotFoundError(f"Cart item #{line_id} not found")


class UpdateCartLineHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str, line_id: int, quantity: int) -> CartDTO:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        with self._uow as uow:
            cart = _owned_cart(uow, customer_id, line_id)
            line = cart.get_line(line_id)

            ledger = StockLedger(uow.skus)
            sku = ledger.get_live_sku(line.sku_id)
            ledger.ensure_available(sku, line.selected_variation, quantity)

            cart.set_quantity(line_id, quantity)
            uow.carts.save(cart)
            uow.commit()
            schemas = schemas_for(uow.skus, (l.sku_id for l in cart.lines))

        return cart_to_dto(cart, schemas)


class RemoveCartLineHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str, line_id: int) -> CartDTO:
        with self._uow as uow:
            cart = _owned_cart(uow, customer_id, line_id)
            cart.remove_line(line_id)
            uow.carts.save(cart)
            uow.commit()
            schemas = schemas_for(uow.skus, (l.sku_id for l in cart.lines))

        return cart_to_dto(cart, schemas)
