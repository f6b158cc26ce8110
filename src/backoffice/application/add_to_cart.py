"""Application service: Add To Cart use case.

The stock check here is advisory.  Nothing is reserved; checkout
validates again against whatever stock exists at that moment.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import CartDTO, cart_to_dto, schemas_for
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.cart import Cart, CartLine
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        customer_id: str,
        sku_id: str,
        quantity: int = 1,
        selection: dict[str, str] | None = None,
    ) -> CartDTO:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        with self._uow as uow:
            ledger = StockLedger(uow.skus)
            sku = ledger.get_live_sku(sku_id)
            cart = uow.carts.get_for_customer(customer_id) or Cart(customer_id=customer_id)

            # The same SKU/variation merges into one line, so the check
            # covers what the line would hold afterwards.
            existing = cart.find_line(sku.id, selection)
            would_be = quantity + (existing.quantity if existing else 0)
            ledger.ensure_available(sku, selection, would_be)

            if existing is not None:
                cart.set_quantity(existing.id, would_be)
            else:
                cart.add_line(
                    CartLine(
                        id=uow.carts.next_line_id(),
                        sku_id=sku.id,
                        sku_name=sku.name,
                        quantity=quantity,
                        unit_price=sku.unit_price,
                        selected_variation=dict(selection or {}),
                    )
                )

            uow.carts.save(cart)
            uow.commit()
            schemas = schemas_for(uow.skus, (line.sku_id for line in cart.lines))

        logger.info("Customer %s added %d x %s to cart", customer_id, quantity, sku.name)
        return cart_to_dto(cart, schemas)
