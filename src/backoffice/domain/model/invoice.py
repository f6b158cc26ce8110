"""Invoice aggregate: the priced, frozen bill for a completed booking.

Amounts are fixed at generation.  Only the PDF link and the payment
review record may change afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backoffice.domain.exceptions import (
    InvalidStateTransitionError,
    ValidationError,
)
from backoffice.domain.model.order import Receipt
from backoffice.domain.model.value_objects import Money

INVOICE_NUMBER_PATTERN = re.compile(r"^INV-(\d{4})-(\d{6})$")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_invoice_number(year: int, sequence: int) -> str:
    return f"INV-{year}-{sequence:06d}"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAYMENT_SUBMITTED = "PAYMENT_SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class InvoicePayment:
    """Manual payment review for an invoice (no gateway involved)."""

    status: PaymentStatus = PaymentStatus.PENDING
    receipt: Receipt | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def submit_receipt(self, receipt: Receipt) -> None:
        # A receipt can be replaced only after the admin rejected it.
        if self.receipt is not None and self.status != PaymentStatus.REJECTED:
            raise InvalidStateTransitionError(
                "Receipt has already been uploaded for this invoice"
            )
        self.receipt = receipt
        self.status = PaymentStatus.PAYMENT_SUBMITTED
        self.updated_at = _now()

    def approve(self, admin_id: str) -> None:
        self._receipt_under_review("approve").approve(admin_id)
        self.status = PaymentStatus.APPROVED
        self.updated_at = _now()

    def reject(self, admin_id: str, reason: str) -> None:
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")
        self._receipt_under_review("reject").reject(admin_id, reason.strip())
        self.status = PaymentStatus.REJECTED
        self.updated_at = _now()

    def _receipt_under_review(self, action: str) -> Receipt:
        if self.receipt is None or self.status != PaymentStatus.PAYMENT_SUBMITTED:
            raise InvalidStateTransitionError(
                f"Cannot {action} payment: no receipt awaiting review "
                f"(status {self.status.value})"
            )
        return self.receipt


@dataclass
class Invoice:
    """Aggregate root for invoices.

    ``total_amount`` is derived once, in ``Invoice.create()``, and stored;
    it is never recomputed from live data.
    """

    id: int | None
    booking_id: int
    customer_id: str
    invoice_number: str
    service_amount: Money
    parts_amount: Money
    total_amount: Money
    generated_at: datetime = field(default_factory=_now)
    pdf_url: str | None = None
    payment: InvoicePayment | None = None

    @staticmethod
    def create(
        booking_id: int,
        customer_id: str,
        invoice_number: str,
        service_amount: Money,
        parts_amount: Money,
    ) -> Invoice:
        if not INVOICE_NUMBER_PATTERN.match(invoice_number):
            raise ValidationError(f"Malformed invoice number: {invoice_number!r}")
        return Invoice(
            id=None,
            booking_id=booking_id,
            customer_id=customer_id,
            invoice_number=invoice_number,
            service_amount=service_amount,
            parts_amount=parts_amount,
            total_amount=service_amount + parts_amount,
        )

    def attach_pdf(self, pdf_url: str) -> None:
        if not pdf_url or not pdf_url.strip():
            raise ValidationError("PDF URL is required")
        self.pdf_url = pdf_url.strip()

    def initiate_payment(self) -> InvoicePayment:
        """Start payment review; returns the existing record if there is one."""
        if self.payment is None:
            self.payment = InvoicePayment()
        return self.payment

    def require_payment(self) -> InvoicePayment:
        if self.payment is None:
            raise InvalidStateTransitionError(
                f"Payment for invoice {self.invoice_number} has not been "
                f"initiated"
            )
        return self.payment
