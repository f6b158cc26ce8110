"""JSON-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from backoffice.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    Receipt,
    ReceiptStatus,
)
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from backoffice.domain.repository.order_repository import OrderRepository


def money_to_raw(money: Money | None) -> dict | None:
    if money is None:
        return None
    return {"amount": str(money.amount), "currency": money.currency}


def money_from_raw(raw: dict | None) -> Money | None:
    if raw is None:
        return None
    return Money(Decimal(raw["amount"]), raw.get("currency", DEFAULT_CURRENCY))


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def receipt_to_raw(receipt: Receipt | None) -> dict | None:
    if receipt is None:
        return None
    return {
        "file_url": receipt.file_url,
        "amount": money_to_raw(receipt.amount),
        "notes": receipt.notes,
        "status": receipt.status.value,
        "admin_notes": receipt.admin_notes,
        "reviewed_by": receipt.reviewed_by,
        "uploaded_at": receipt.uploaded_at.isoformat(),
        "reviewed_at": receipt.reviewed_at.isoformat() if receipt.reviewed_at else None,
    }


def receipt_from_raw(raw: dict | None) -> Receipt | None:
    if raw is None:
        return None
    return Receipt(
        file_url=raw["file_url"],
        amount=money_from_raw(raw.get("amount")),
        notes=raw.get("notes", ""),
        status=ReceiptStatus(raw["status"]),
        admin_notes=raw.get("admin_notes"),
        reviewed_by=raw.get("reviewed_by"),
        uploaded_at=datetime.fromisoformat(raw["uploaded_at"]),
        reviewed_at=_dt(raw.get("reviewed_at")),
    )


class JsonOrderRepository(OrderRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self, customer_id: str | None = None) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._load_raw()
            if customer_id is None or raw["customer_id"] == customer_id
        ]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    def count_lines_for_sku(self, sku_id: str) -> int:
        return sum(
            1
            for raw in self._load_raw()
            for line in raw["lines"]
            if line["sku_id"] == sku_id
        )

    def save(self, order: Order) -> None:
        orders = self._load_raw()

        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        replaced = False
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                replaced = True
                break
        if not replaced:
            orders.append(self._to_raw(order))

        self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "lines": [
                {
                    "sku_id": line.sku_id,
                    "sku_name": line.sku_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "selected_variation": dict(line.selected_variation),
                }
                for line in order.lines
            ],
            "receipt": receipt_to_raw(order.receipt),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                sku_id=l["sku_id"],
                sku_name=l["sku_name"],
                quantity=Quantity(l["quantity"]),
                unit_price=Money(Decimal(l["unit_price"]), l.get("currency", DEFAULT_CURRENCY)),
                selected_variation=dict(l.get("selected_variation") or {}),
            )
            for l in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            customer_id=raw["customer_id"],
            lines=lines,
            status=OrderStatus(raw["status"]),
            receipt=receipt_from_raw(raw.get("receipt")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- Record helpers -------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._records

    def _persist_raw(self, orders: list[dict]) -> None:
        if orders is not self._records:
            self._records[:] = orders
