"""Application services: invoice queries and PDF attachment."""

from __future__ import annotations

from backoffice.application.dto import InvoiceDTO, invoice_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ShowInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int) -> InvoiceDTO:
        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")
            return invoice_to_dto(invoice)

    def for_booking(self, booking_id: int) -> InvoiceDTO:
        with self._uow as uow:
            invoice = uow.invoices.get_for_booking(booking_id)
            if invoice is None:
                raise EntityNotFoundError(f"No invoice for booking #{booking_id}")
            return invoice_to_dto(invoice)


class ListInvoicesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str) -> list[InvoiceDTO]:
        """A customer's invoices, newest first."""
        with self._uow as uow:
            return [invoice_to_dto(i) for i in uow.invoices.list_for_customer(customer_id)]


class AttachInvoicePdfHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, pdf_url: str) -> InvoiceDTO:
        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")
            invoice.attach_pdf(pdf_url)
            uow.invoices.save(invoice)
            uow.commit()
        return invoice_to_dto(invoice)
