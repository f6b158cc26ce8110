"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the application layer and its callers (the CLI,
or any request-handling layer) without exposing domain internals.
Money values are pre-formatted strings, timestamps are UTC strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from backoffice.domain.model import variation
from backoffice.domain.model.cart import Cart
from backoffice.domain.model.invoice import Invoice
from backoffice.domain.model.order import Order
from backoffice.domain.model.parts_request import PartsRequest
from backoffice.domain.model.sku import Sku
from backoffice.domain.model.variation import VariationOption
from backoffice.domain.repository.sku_repository import SkuRepository

Schemas = dict[str, "list[VariationOption] | None"]


@dataclass(frozen=True)
class SkuDTO:
    id: str
    code: str
    name: str
    unit_price: str
    total_qty: int
    min_stock_level: int
    low_stock: bool
    has_variations: bool
    stock_summary: dict[str, int]
    active: bool
    deleted: bool
    category: str = ""
    brand: str = ""
    description: str = ""


@dataclass(frozen=True)
class CartLineDTO:
    id: int
    sku_id: str
    sku_name: str
    quantity: int
    unit_price: str
    line_total: str
    selected_variation: dict[str, str] = field(default_factory=dict)
    variation_display: str = ""


@dataclass(frozen=True)
class CartDTO:
    customer_id: str
    lines: list[CartLineDTO]
    total_amount: str
    total_items: int


@dataclass(frozen=True)
class OrderLineDTO:
    sku_id: str
    sku_name: str
    quantity: int
    unit_price: str
    line_total: str
    variation_display: str = ""


@dataclass(frozen=True)
class OrderDTO:
    id: int
    customer_id: str
    status: str
    lines: list[OrderLineDTO]
    total: str
    created_at: str
    has_receipt: bool
    receipt_status: str | None = None
    admin_notes: str | None = None


@dataclass(frozen=True)
class PartsRequestDTO:
    id: int
    booking_id: int
    mechanic_id: str
    sku_id: str
    sku_name: str
    quantity: int
    status: str
    requested_at: str
    reason: str = ""
    selected_variation: dict[str, str] = field(default_factory=dict)
    variation_display: str = ""


@dataclass(frozen=True)
class InvoiceDTO:
    id: int
    invoice_number: str
    booking_id: int
    customer_id: str
    service_amount: str
    parts_amount: str
    total_amount: str
    generated_at: str
    pdf_url: str | None = None
    payment_status: str | None = None


@dataclass(frozen=True)
class DependencyDTO:
    """How much history still points at a SKU."""

    order_lines: int
    cart_lines: int
    parts_requests: int

    @property
    def has_dependencies(self) -> bool:
        return bool(self.order_lines or self.cart_lines or self.parts_requests)

    @property
    def description(self) -> str:
        parts = []
        if self.order_lines:
            parts.append(f"{self.order_lines} order item(s)")
        if self.cart_lines:
            parts.append(f"{self.cart_lines} cart item(s)")
        if self.parts_requests:
            parts.append(f"{self.parts_requests} request(s)")
        return ", ".join(parts)


# --- Mapping ------------------------------------------------------------------


def _timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC")


def schemas_for(sku_repo: SkuRepository, sku_ids: Iterable[str]) -> Schemas:
    """Variation schemas for display, keyed by SKU ID."""
    schemas: Schemas = {}
    for sku_id in set(sku_ids):
        sku = sku_repo.get_by_id(sku_id)
        schemas[sku_id] = sku.variation_schema if sku is not None else None
    return schemas


def sku_to_dto(sku: Sku) -> SkuDTO:
    return SkuDTO(
        id=sku.id,
        code=sku.code,
        name=sku.name,
        unit_price=str(sku.unit_price),
        total_qty=sku.total_qty,
        min_stock_level=sku.min_stock_level,
        low_stock=sku.is_low_stock(),
        has_variations=sku.has_variations,
        stock_summary=sku.stock_summary(),
        active=sku.active,
        deleted=sku.deleted,
        category=sku.category,
        brand=sku.brand,
        description=sku.description,
    )


def cart_to_dto(cart: Cart, schemas: Schemas) -> CartDTO:
    return CartDTO(
        customer_id=cart.customer_id,
        lines=[
            CartLineDTO(
                id=line.id,
                sku_id=line.sku_id,
                sku_name=line.sku_name,
                quantity=line.quantity,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                selected_variation=dict(line.selected_variation),
                variation_display=variation.describe(
                    schemas.get(line.sku_id), line.selected_variation
                ),
            )
            for line in cart.lines
        ],
        total_amount=str(cart.total_amount),
        total_items=cart.total_items,
    )


def order_to_dto(order: Order, schemas: Schemas) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        status=order.status.value,
        lines=[
            OrderLineDTO(
                sku_id=line.sku_id,
                sku_name=line.sku_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                variation_display=variation.describe(
                    schemas.get(line.sku_id), line.selected_variation
                ),
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=_timestamp(order.created_at),
        has_receipt=order.has_receipt,
        receipt_status=order.receipt.status.value if order.receipt else None,
        admin_notes=order.receipt.admin_notes if order.receipt else None,
    )


def request_to_dto(request: PartsRequest, schemas: Schemas) -> PartsRequestDTO:
    return PartsRequestDTO(
        id=request.id,  # type: ignore[arg-type]
        booking_id=request.booking_id,
        mechanic_id=request.mechanic_id,
        sku_id=request.sku_id,
        sku_name=request.sku_name,
        quantity=request.quantity.value,
        status=request.status.value,
        requested_at=_timestamp(request.requested_at),
        reason=request.reason,
        selected_variation=dict(request.selected_variation),
        variation_display=variation.describe(
            schemas.get(request.sku_id), request.selected_variation
        ),
    )


def invoice_to_dto(invoice: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        id=invoice.id,  # type: ignore[arg-type]
        invoice_number=invoice.invoice_number,
        booking_id=invoice.booking_id,
        customer_id=invoice.customer_id,
        service_amount=str(invoice.service_amount),
        parts_amount=str(invoice.parts_amount),
        total_amount=str(invoice.total_amount),
        generated_at=_timestamp(invoice.generated_at),
        pdf_url=invoice.pdf_url,
        payment_status=invoice.payment.status.value if invoice.payment else None,
    )
