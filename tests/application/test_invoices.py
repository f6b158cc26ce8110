"""Integration tests for invoice generation and invoice payment."""

from datetime import datetime, timezone

import pytest

from backoffice.application.create_parts_request import CreatePartsRequestHandler
from backoffice.application.generate_invoice import GenerateInvoiceHandler
from backoffice.application.invoice_payment import (
    ApprovePaymentHandler,
    InitiatePaymentHandler,
    RejectPaymentHandler,
    SubmitPaymentReceiptHandler,
)
from backoffice.application.review_parts_request import (
    ApprovePartsRequestHandler,
    RejectPartsRequestHandler,
)
from backoffice.application.show_invoice import (
    AttachInvoicePdfHandler,
    ListInvoicesHandler,
    ShowInvoiceHandler,
)
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateTransitionError,
    NotAuthorizedError,
)
from backoffice.domain.model.booking import Booking, BookingStatus, ServiceOffering
from backoffice.domain.model.invoice import Invoice, format_invoice_number
from backoffice.domain.model.sku import Sku
from backoffice.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, InMemoryState


def _setup() -> FakeUnitOfWork:
    """Booking 1 has an approved 2 x oil and 1 x filter, plus a rejected request."""
    uow = FakeUnitOfWork(
        InMemoryState().add(
            Sku(id="oil", code="OIL", name="Engine Oil", unit_price=Money.of("38.00"),
                total_qty=10),
            Sku(id="flt", code="FLT", name="Oil Filter", unit_price=Money.of("15.00"),
                total_qty=10),
            ServiceOffering(id="svc", name="Full Service", base_price=Money.of("120.00")),
            Booking(id=1, customer_id="c1", service_id="svc",
                    status=BookingStatus.IN_PROGRESS, assigned_mechanic_id="mech-1"),
        )
    )
    create = CreatePartsRequestHandler(uow)
    approve = ApprovePartsRequestHandler(uow)
    approve.handle(create.handle(1, "mech-1", "oil", 2).id, "admin")
    approve.handle(create.handle(1, "mech-1", "flt", 1).id, "admin")
    rejected = create.handle(1, "mech-1", "oil", 5)
    RejectPartsRequestHandler(uow).handle(rejected.id, "admin")

    uow.state.bookings[1].status = BookingStatus.COMPLETED
    return uow


class TestGenerateInvoice:

    def test_prices_service_and_approved_parts(self):
        dto = GenerateInvoiceHandler(_setup()).handle(1)
        assert dto.service_amount == "RM120.00"
        assert dto.parts_amount == "RM91.00"
        assert dto.total_amount == "RM211.00"
        year = datetime.now(timezone.utc).year
        assert dto.invoice_number == f"INV-{year}-000001"

    def test_idempotent(self):
        uow = _setup()
        first = GenerateInvoiceHandler(uow).handle(1)
        uow.state.skus["oil"].unit_price = Money.of("99.00")
        second = GenerateInvoiceHandler(uow).handle(1)
        assert second == first
        assert len(uow.state.invoices) == 1

    def test_uses_current_price_by_default(self):
        uow = _setup()
        uow.state.skus["oil"].unit_price = Money.of("40.00")
        dto = GenerateInvoiceHandler(uow).handle(1)
        assert dto.parts_amount == "RM95.00"

    def test_frozen_price_setting(self):
        uow = _setup()
        uow.state.skus["oil"].unit_price = Money.of("40.00")
        dto = GenerateInvoiceHandler(uow, freeze_parts_price_at_approval=True).handle(1)
        assert dto.parts_amount == "RM91.00"

    def test_requires_completed_booking(self):
        uow = _setup()
        uow.state.bookings[1].status = BookingStatus.IN_PROGRESS
        with pytest.raises(InvalidStateTransitionError, match="completed bookings"):
            GenerateInvoiceHandler(uow).handle(1)

    def test_number_skips_taken_numbers(self):
        uow = _setup()
        year = datetime.now(timezone.utc).year
        # An imported invoice already holds the next number in sequence.
        existing = Invoice.create(
            booking_id=99, customer_id="c9",
            invoice_number=format_invoice_number(year, 2),
            service_amount=Money.of("1"), parts_amount=Money.of("0"),
        )
        existing.id = 1
        uow.state.add(existing)

        dto = GenerateInvoiceHandler(uow).handle(1)

        assert dto.invoice_number == format_invoice_number(year, 3)

    def test_no_approved_parts(self):
        uow = FakeUnitOfWork(
            InMemoryState().add(
                ServiceOffering(id="svc", name="Inspection", base_price=Money.of("80.00")),
                Booking(id=5, customer_id="c1", service_id="svc",
                        status=BookingStatus.COMPLETED),
            )
        )
        dto = GenerateInvoiceHandler(uow).handle(5)
        assert dto.parts_amount == "RM0.00"
        assert dto.total_amount == "RM80.00"


class TestInvoiceQueries:

    def test_show_by_id_and_booking(self):
        uow = _setup()
        generated = GenerateInvoiceHandler(uow).handle(1)
        assert ShowInvoiceHandler(uow).handle(generated.id) == generated
        assert ShowInvoiceHandler(uow).for_booking(1) == generated

    def test_missing_invoice_for_booking(self):
        with pytest.raises(EntityNotFoundError, match="No invoice for booking #1"):
            ShowInvoiceHandler(_setup()).for_booking(1)

    def test_attach_pdf(self):
        uow = _setup()
        generated = GenerateInvoiceHandler(uow).handle(1)
        dto = AttachInvoicePdfHandler(uow).handle(generated.id, "pdf/inv.pdf")
        assert dto.pdf_url == "pdf/inv.pdf"
        assert dto.total_amount == generated.total_amount

    def test_list_for_customer_newest_first(self):
        uow = _setup()
        older = Invoice.create(
            booking_id=7, customer_id="c1", invoice_number="INV-2020-000001",
            service_amount=Money.of("50"), parts_amount=Money.of("0"),
        )
        older.id = 7
        older.generated_at = datetime(2020, 5, 1, tzinfo=timezone.utc)
        other = Invoice.create(
            booking_id=8, customer_id="c2", invoice_number="INV-2020-000002",
            service_amount=Money.of("60"), parts_amount=Money.of("0"),
        )
        other.id = 8
        uow.state.add(older, other)
        generated = GenerateInvoiceHandler(uow).handle(1)

        invoices = ListInvoicesHandler(uow).handle("c1")

        assert [i.invoice_number for i in invoices] == [
            generated.invoice_number, "INV-2020-000001",
        ]
        assert ListInvoicesHandler(uow).handle("nobody") == []


class TestInvoicePayment:

    def test_full_flow(self):
        uow = _setup()
        invoice_id = GenerateInvoiceHandler(uow).handle(1).id

        assert InitiatePaymentHandler(uow).handle(invoice_id, "c1").payment_status == "PENDING"
        submitted = SubmitPaymentReceiptHandler(uow).handle(invoice_id, "c1", "r.jpg", "211.00")
        assert submitted.payment_status == "PAYMENT_SUBMITTED"
        rejected = RejectPaymentHandler(uow).handle(invoice_id, "admin", "Wrong account")
        assert rejected.payment_status == "REJECTED"
        SubmitPaymentReceiptHandler(uow).handle(invoice_id, "c1", "r2.jpg")
        approved = ApprovePaymentHandler(uow).handle(invoice_id, "admin")
        assert approved.payment_status == "APPROVED"

    def test_initiate_is_idempotent(self):
        uow = _setup()
        invoice_id = GenerateInvoiceHandler(uow).handle(1).id
        InitiatePaymentHandler(uow).handle(invoice_id, "c1")
        SubmitPaymentReceiptHandler(uow).handle(invoice_id, "c1", "r.jpg")
        dto = InitiatePaymentHandler(uow).handle(invoice_id, "c1")
        assert dto.payment_status == "PAYMENT_SUBMITTED"

    def test_receipt_needs_initiated_payment(self):
        uow = _setup()
        invoice_id = GenerateInvoiceHandler(uow).handle(1).id
        with pytest.raises(InvalidStateTransitionError, match="not been initiated"):
            SubmitPaymentReceiptHandler(uow).handle(invoice_id, "c1", "r.jpg")

    def test_other_customer_not_authorized(self):
        uow = _setup()
        invoice_id = GenerateInvoiceHandler(uow).handle(1).id
        with pytest.raises(NotAuthorizedError):
            InitiatePaymentHandler(uow).handle(invoice_id, "c2")
