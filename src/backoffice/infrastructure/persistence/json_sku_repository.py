"""JSON-backed implementation of SkuRepository.

Variation schema and variation stock are stored as nested JSON and
converted to their dataclasses here, so nothing above this layer sees
raw dictionaries.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from backoffice.domain.exceptions import ConcurrencyConflictError
from backoffice.domain.model.sku import DEFAULT_MIN_STOCK_LEVEL, Sku, VariationStock
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money
from backoffice.domain.model.variation import VariationOption
from backoffice.domain.repository.sku_repository import SkuRepository


class JsonSkuRepository(SkuRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- SkuRepository interface ----------------------------------------------

    def get_by_id(self, sku_id: str) -> Sku | None:
        for raw in self._load_raw():
            if raw["id"] == sku_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Sku | None:
        for raw in self._load_raw():
            if raw["code"].lower() == code.lower():
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Sku | None:
        for raw in self._load_raw():
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self, include_deleted: bool = False) -> list[Sku]:
        skus = [self._to_domain(raw) for raw in self._load_raw()]
        if not include_deleted:
            skus = [s for s in skus if not s.deleted]
        return sorted(skus, key=lambda s: s.name.lower())

    def next_id(self) -> str:
        return str(uuid.uuid4())

    def save(self, sku: Sku) -> None:
        skus = self._load_raw()

        for i, raw in enumerate(skus):
            if raw["id"] == sku.id:
                stored = raw.get("version", 0)
                if stored != sku.version:
                    raise ConcurrencyConflictError(
                        f"{sku.name} was modified concurrently "
                        f"(version {sku.version}, stored {stored}); retry"
                    )
                sku.version += 1
                skus[i] = self._to_raw(sku)
                break
        else:
            sku.version += 1
            skus.append(self._to_raw(sku))

        self._persist_raw(skus)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sku: Sku) -> dict:
        schema = None
        if sku.variation_schema is not None:
            schema = [
                {
                    "variation_id": option.variation_id,
                    "name": option.name,
                    "type": option.type,
                    "allowed_values": list(option.allowed_values),
                    "required": option.required,
                }
                for option in sku.variation_schema
            ]
        stock = None
        if sku.variation_stock is not None:
            stock = {
                "allocations": dict(sku.variation_stock.allocations),
                "unallocated": sku.variation_stock.unallocated,
            }
        return {
            "id": sku.id,
            "code": sku.code,
            "name": sku.name,
            "unit_price": str(sku.unit_price.amount),
            "currency": sku.unit_price.currency,
            "total_qty": sku.total_qty,
            "min_stock_level": sku.min_stock_level,
            "variation_schema": schema,
            "variation_stock": stock,
            "description": sku.description,
            "category": sku.category,
            "brand": sku.brand,
            "active": sku.active,
            "deleted": sku.deleted,
            "version": sku.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Sku:
        schema = None
        if raw.get("variation_schema"):
            schema = [
                VariationOption(
                    variation_id=o["variation_id"],
                    name=o["name"],
                    allowed_values=tuple(o["allowed_values"]),
                    type=o.get("type", "dropdown"),
                    required=o.get("required", True),
                )
                for o in raw["variation_schema"]
            ]
        stock = None
        if schema and raw.get("variation_stock") is not None:
            stock = VariationStock(
                allocations={k: int(v) for k, v in raw["variation_stock"]["allocations"].items()},
                unallocated=int(raw["variation_stock"]["unallocated"]),
            )
        return Sku(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", DEFAULT_CURRENCY)),
            total_qty=raw["total_qty"],
            min_stock_level=raw.get("min_stock_level", DEFAULT_MIN_STOCK_LEVEL),
            variation_schema=schema,
            variation_stock=stock,
            description=raw.get("description", ""),
            category=raw.get("category", ""),
            brand=raw.get("brand", ""),
            active=raw.get("active", True),
            deleted=raw.get("deleted", False),
            version=raw.get("version", 0),
        )

    # --- Record helpers -------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._records

    def _persist_raw(self, skus: list[dict]) -> None:
        if skus is not self._records:
            self._records[:] = skus
