"""Application service: Create Order (checkout) use case.

Turns a customer's cart into an order.  Stock is deducted at checkout,
not at payment approval, and the whole operation runs in one unit of
work: if any line fails, no stock moves, no order exists and the cart
keeps its lines.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import OrderDTO, order_to_dto, schemas_for
from backoffice.domain.exceptions import EmptyCartError
from backoffice.domain.model.order import Order, OrderLine
from backoffice.domain.model.value_objects import Quantity
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.stock_ledger import StockDraw, StockLedger

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str) -> OrderDTO:
        with self._uow as uow:
            cart = uow.carts.get_for_customer(customer_id)
            if cart is None or cart.is_empty:
                raise EmptyCartError("Cart is empty")

            ledger = StockLedger(uow.skus)

            # Re-check every line so the first shortfall is reported by
            # name before anything is touched.
            for line in cart.lines:
                sku = ledger.get_live_sku(line.sku_id)
                ledger.ensure_available(sku, line.selected_variation, line.quantity)

            ledger.deduct_lines(
                [
                    StockDraw(line.sku_id, line.quantity, dict(line.selected_variation))
                    for line in cart.lines
                ]
            )

            order = Order.create(
                customer_id,
                [
                    OrderLine(
                        sku_id=line.sku_id,
                        sku_name=line.sku_name,
                        quantity=Quantity(line.quantity),
                        unit_price=line.unit_price,
                        selected_variation=dict(line.selected_variation),
                    )
                    for line in cart.lines
                ],
            )
            uow.orders.save(order)

            cart.clear()
            uow.carts.save(cart)
            uow.commit()
            schemas = schemas_for(uow.skus, (line.sku_id for line in order.lines))

        logger.info(
            "Order #%s created for customer %s (%d lines, total %s)",
            order.id, customer_id, len(order.lines), order.total,
        )
        return order_to_dto(order, schemas)
