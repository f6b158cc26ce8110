"""Order aggregate: a committed purchase created from a cart.

Lines and prices are frozen at creation; only the payment review status
(and the attached receipt) moves afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backoffice.domain.exceptions import InvalidStateTransitionError, ValidationError
from backoffice.domain.model import variation
from backoffice.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAYMENT_SUBMITTED = "PAYMENT_SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReceiptStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLine:
    """Captures what was bought and the price paid at checkout time."""

    sku_id: str
    sku_name: str
    quantity: Quantity
    unit_price: Money  # locked at checkout
    selected_variation: dict[str, str] = field(default_factory=dict)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def variation_key(self) -> str:
        return variation.build_key(self.selected_variation)


@dataclass
class Receipt:
    """Customer-submitted proof of payment, reviewed manually by an admin."""

    file_url: str
    amount: Money | None = None
    notes: str = ""
    status: ReceiptStatus = ReceiptStatus.PENDING
    admin_notes: str | None = None
    reviewed_by: str | None = None
    uploaded_at: datetime = field(default_factory=_now)
    reviewed_at: datetime | None = None

    def approve(self, admin_id: str) -> None:
        self.status = ReceiptStatus.APPROVED
        self.reviewed_by = admin_id
        self.reviewed_at = _now()

    def reject(self, admin_id: str, reason: str) -> None:
        self.status = ReceiptStatus.REJECTED
        self.reviewed_by = admin_id
        self.admin_notes = reason
        self.reviewed_at = _now()


@dataclass
class Order:
    """Aggregate root for customer part orders.

    Use ``Order.create()`` for new orders.  The ``__init__`` stays simple
    so the repository can reconstitute persisted orders without
    re-validating.
    """

    id: int | None
    customer_id: str
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.PENDING
    receipt: Receipt | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(customer_id: str, lines: list[OrderLine]) -> Order:
        if not customer_id:
            raise ValidationError("Customer is required")
        if not lines:
            raise ValidationError("Order must contain at least one item")
        return Order(id=None, customer_id=customer_id, lines=list(lines))

    # --- State transitions ----------------------------------------------------

    def submit_receipt(self, receipt: Receipt) -> None:
        """PENDING|REJECTED -> PAYMENT_SUBMITTED.

        Overwrites any previous receipt, which also drops earlier admin
        rejection notes.
        """
        if self.status not in (OrderStatus.PENDING, OrderStatus.REJECTED):
            raise InvalidStateTransitionError(
                f"Receipt can only be uploaded for pending or rejected orders "
                f"(order #{self.id} is {self.status.value})"
            )
        self.receipt = receipt
        self.status = OrderStatus.PAYMENT_SUBMITTED
        self.updated_at = _now()

    def approve(self, admin_id: str) -> None:
        """PAYMENT_SUBMITTED -> APPROVED.  Stock was already deducted."""
        self._receipt_under_review("approve").approve(admin_id)
        self.status = OrderStatus.APPROVED
        self.updated_at = _now()

    def reject(self, admin_id: str, reason: str) -> None:
        """PAYMENT_SUBMITTED -> REJECTED.  The customer may upload again."""
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")
        self._receipt_under_review("reject").reject(admin_id, reason.strip())
        self.status = OrderStatus.REJECTED
        self.updated_at = _now()

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero(self.lines[0].unit_price.currency) if self.lines else Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def has_receipt(self) -> bool:
        return self.receipt is not None

    # --- Internal helpers -----------------------------------------------------

    def _receipt_under_review(self, action: str) -> Receipt:
        if self.status != OrderStatus.PAYMENT_SUBMITTED or self.receipt is None:
            raise InvalidStateTransitionError(
                f"Cannot {action} order #{self.id}: current status is "
                f"{self.status.value}, expected PAYMENT_SUBMITTED"
            )
        return self.receipt
