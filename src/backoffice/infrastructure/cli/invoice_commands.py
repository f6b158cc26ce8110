"""CLI commands for booking invoices and their payment."""

from __future__ import annotations

import click

from backoffice.application.dto import InvoiceDTO
from backoffice.application.generate_invoice import GenerateInvoiceHandler
from backoffice.application.invoice_payment import (
    ApprovePaymentHandler,
    InitiatePaymentHandler,
    RejectPaymentHandler,
    SubmitPaymentReceiptHandler,
)
from backoffice.application.show_invoice import (
    AttachInvoicePdfHandler,
    ListInvoicesHandler,
    ShowInvoiceHandler,
)
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import unit_of_work
from backoffice.infrastructure.settings import Settings


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}  (booking #{dto.booking_id})")
    click.echo(f"Customer:  {dto.customer_id}")
    click.echo(f"Generated: {dto.generated_at}")
    click.echo(f"  {'Service':<20} {dto.service_amount:>12}")
    click.echo(f"  {'Parts':<20} {dto.parts_amount:>12}")
    click.echo(f"  {'-'*33}")
    click.echo(f"  {'Total':<20} {dto.total_amount:>12}")
    if dto.pdf_url:
        click.echo(f"PDF:       {dto.pdf_url}")
    if dto.payment_status:
        click.echo(f"Payment:   {dto.payment_status}")


@click.command("generate")
@click.option("--booking", "booking_id", required=True, type=int, help="Completed booking ID.")
@click.pass_obj
def invoice_generate(settings: Settings, booking_id: int) -> None:
    """Generate the invoice for a completed booking (idempotent)."""
    handler = GenerateInvoiceHandler(
        unit_of_work(settings),
        currency=settings.currency,
        freeze_parts_price_at_approval=settings.freeze_parts_price_at_approval,
    )

    try:
        dto = handler.handle(booking_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("show")
@click.option("--id", "invoice_id", default=None, type=int, help="Invoice ID.")
@click.option("--booking", "booking_id", default=None, type=int, help="Booking ID.")
@click.pass_obj
def invoice_show(settings: Settings, invoice_id: int | None, booking_id: int | None) -> None:
    """Show an invoice by ID or by booking."""
    if (invoice_id is None) == (booking_id is None):
        raise click.UsageError("Pass exactly one of --id or --booking")

    handler = ShowInvoiceHandler(unit_of_work(settings))

    try:
        if invoice_id is not None:
            dto = handler.handle(invoice_id)
        else:
            dto = handler.for_booking(booking_id)  # type: ignore[arg-type]
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("list")
@click.option("--customer", required=True, help="Customer ID.")
@click.pass_obj
def invoice_list(settings: Settings, customer: str) -> None:
    """List a customer's invoices, newest first."""
    invoices = ListInvoicesHandler(unit_of_work(settings)).handle(customer)

    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"{'Number':<18} {'Booking':<8} {'Total':>12}  {'Payment':<18} Generated")
    click.echo("-" * 78)
    for dto in invoices:
        click.echo(
            f"{dto.invoice_number:<18} {dto.booking_id:<8} {dto.total_amount:>12}  "
            f"{dto.payment_status or '-':<18} {dto.generated_at}"
        )


@click.command("attach-pdf")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--url", required=True, help="Location of the rendered PDF.")
@click.pass_obj
def invoice_attach_pdf(settings: Settings, invoice_id: int, url: str) -> None:
    """Record where an invoice's PDF lives."""
    handler = AttachInvoicePdfHandler(unit_of_work(settings))

    try:
        dto = handler.handle(invoice_id, url)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"PDF attached to invoice {dto.invoice_number}")


@click.command("pay")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--customer", required=True, help="Customer ID.")
@click.pass_obj
def invoice_pay(settings: Settings, invoice_id: int, customer: str) -> None:
    """Start paying an invoice."""
    handler = InitiatePaymentHandler(unit_of_work(settings))

    try:
        dto = handler.handle(invoice_id, customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment for invoice {dto.invoice_number}: {dto.payment_status}")


@click.command("receipt")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--file", "file_url", required=True, help="Receipt file URL or path.")
@click.option("--amount", default=None, help="Amount paid.")
@click.option("--notes", default="", help="Notes for the reviewer.")
@click.pass_obj
def invoice_receipt(
    settings: Settings,
    invoice_id: int,
    customer: str,
    file_url: str,
    amount: str | None,
    notes: str,
) -> None:
    """Upload a payment receipt for an invoice."""
    handler = SubmitPaymentReceiptHandler(unit_of_work(settings))

    try:
        dto = handler.handle(invoice_id, customer, file_url, amount=amount, notes=notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Receipt submitted for invoice {dto.invoice_number}")


@click.command("approve-payment")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.pass_obj
def invoice_approve_payment(settings: Settings, invoice_id: int, admin: str) -> None:
    """Approve an invoice payment receipt."""
    handler = ApprovePaymentHandler(unit_of_work(settings))

    try:
        dto = handler.handle(invoice_id, admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment for invoice {dto.invoice_number} approved")


@click.command("reject-payment")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.option("--reason", required=True, help="Why the receipt was rejected.")
@click.pass_obj
def invoice_reject_payment(settings: Settings, invoice_id: int, admin: str, reason: str) -> None:
    """Reject an invoice payment receipt."""
    handler = RejectPaymentHandler(unit_of_work(settings))

    try:
        dto = handler.handle(invoice_id, admin, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment for invoice {dto.invoice_number} rejected: {reason}")
