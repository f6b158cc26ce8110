"""Unit tests for the Invoice aggregate and invoice payment."""

import pytest

from backoffice.domain.exceptions import InvalidStateTransitionError, ValidationError
from backoffice.domain.model.invoice import (
    Invoice,
    PaymentStatus,
    format_invoice_number,
)
from backoffice.domain.model.order import Receipt
from backoffice.domain.model.value_objects import Money


def _invoice() -> Invoice:
    return Invoice.create(
        booking_id=7,
        customer_id="c1",
        invoice_number=format_invoice_number(2025, 1),
        service_amount=Money.of("120.00"),
        parts_amount=Money.of("90.00"),
    )


class TestInvoice:

    def test_number_format(self):
        assert format_invoice_number(2025, 42) == "INV-2025-000042"

    def test_total_is_service_plus_parts(self):
        assert _invoice().total_amount == Money.of("210.00")

    def test_malformed_number_rejected(self):
        with pytest.raises(ValidationError, match="Malformed invoice number"):
            Invoice.create(7, "c1", "INV-25-1", Money.of("1"), Money.of("0"))

    def test_attach_pdf(self):
        invoice = _invoice()
        invoice.attach_pdf(" invoices/INV-2025-000001.pdf ")
        assert invoice.pdf_url == "invoices/INV-2025-000001.pdf"

    def test_attach_empty_pdf_rejected(self):
        with pytest.raises(ValidationError):
            _invoice().attach_pdf("")


class TestInvoicePayment:

    def test_initiate_is_idempotent(self):
        invoice = _invoice()
        first = invoice.initiate_payment()
        assert invoice.initiate_payment() is first
        assert first.status == PaymentStatus.PENDING

    def test_require_payment_before_initiation(self):
        with pytest.raises(InvalidStateTransitionError, match="has not been initiated"):
            _invoice().require_payment()

    def test_submit_then_approve(self):
        payment = _invoice().initiate_payment()
        payment.submit_receipt(Receipt(file_url="r.jpg"))
        assert payment.status == PaymentStatus.PAYMENT_SUBMITTED
        payment.approve("admin")
        assert payment.status == PaymentStatus.APPROVED

    def test_reupload_only_after_rejection(self):
        payment = _invoice().initiate_payment()
        payment.submit_receipt(Receipt(file_url="r.jpg"))
        with pytest.raises(InvalidStateTransitionError, match="already been uploaded"):
            payment.submit_receipt(Receipt(file_url="r2.jpg"))

        payment.reject("admin", "Wrong amount")
        payment.submit_receipt(Receipt(file_url="r2.jpg"))
        assert payment.status == PaymentStatus.PAYMENT_SUBMITTED
        assert payment.receipt.file_url == "r2.jpg"

    def test_cannot_approve_without_receipt(self):
        payment = _invoice().initiate_payment()
        with pytest.raises(InvalidStateTransitionError, match="no receipt awaiting review"):
            payment.approve("admin")
