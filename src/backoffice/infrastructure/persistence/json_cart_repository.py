"""JSON-backed implementation of CartRepository (one record per customer)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from backoffice.domain.model.cart import Cart, CartLine
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money
from backoffice.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- CartRepository interface ---------------------------------------------

    def get_for_customer(self, customer_id: str) -> Cart | None:
        for raw in self._load_raw():
            if raw["customer_id"] == customer_id:
                return self._to_domain(raw)
        return None

    def find_by_line_id(self, line_id: int) -> Cart | None:
        for raw in self._load_raw():
            if any(line["id"] == line_id for line in raw["lines"]):
                return self._to_domain(raw)
        return None

    def next_line_id(self) -> int:
        ids = [line["id"] for raw in self._load_raw() for line in raw["lines"]]
        return max(ids, default=0) + 1

    def count_lines_for_sku(self, sku_id: str) -> int:
        return sum(
            1
            for raw in self._load_raw()
            for line in raw["lines"]
            if line["sku_id"] == sku_id
        )

    def save(self, cart: Cart) -> None:
        carts = self._load_raw()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(carts):
            if raw["customer_id"] == cart.customer_id:
                carts[i] = self._to_raw(cart)
                break
        else:
            carts.append(self._to_raw(cart))

        self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "customer_id": cart.customer_id,
            "created_at": cart.created_at.isoformat(),
            "updated_at": cart.updated_at.isoformat(),
            "lines": [
                {
                    "id": line.id,
                    "sku_id": line.sku_id,
                    "sku_name": line.sku_name,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "selected_variation": dict(line.selected_variation),
                    "added_at": line.added_at.isoformat(),
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        lines = [
            CartLine(
                id=l["id"],
                sku_id=l["sku_id"],
                sku_name=l["sku_name"],
                quantity=l["quantity"],
                unit_price=Money(Decimal(l["unit_price"]), l.get("currency", DEFAULT_CURRENCY)),
                selected_variation=dict(l.get("selected_variation") or {}),
                added_at=datetime.fromisoformat(l["added_at"]),
            )
            for l in raw["lines"]
        ]
        return Cart(
            customer_id=raw["customer_id"],
            lines=lines,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- Record helpers -------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._records

    def _persist_raw(self, carts: list[dict]) -> None:
        if carts is not self._records:
            self._records[:] = carts
