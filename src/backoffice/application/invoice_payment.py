"""Application services: manual payment of invoices.

Mirrors the order receipt flow: the customer starts payment, uploads a
receipt, and an admin approves or rejects it.  A rejected receipt can
be replaced.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import InvoiceDTO, invoice_to_dto
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from backoffice.domain.model.invoice import Invoice
from backoffice.domain.model.order import Receipt
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _load(uow: UnitOfWork, invoice_id: int, customer_id: str | None = None) -> Invoice:
    invoice = uow.invoices.get_by_id(invoice_id)
    if invoice is None:
        raise EntityNotFoundError(f"Invoice #{invoice_id} not found")
    if customer_id is not None and invoice.customer_id != customer_id:
        raise NotAuthorizedError(
            f"Invoice {invoice.invoice_number} belongs to another customer"
        )
    return invoice


class InitiatePaymentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, customer_id: str) -> InvoiceDTO:
        with self._uow as uow:
            invoice = _load(uow, invoice_id, customer_id)
            invoice.initiate_payment()
            uow.invoices.save(invoice)
            uow.commit()
        return invoice_to_dto(invoice)


class SubmitPaymentReceiptHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        invoice_id: int,
        customer_id: str,
        file_url: str,
        amount: str | None = None,
        notes: str = "",
    ) -> InvoiceDTO:
        if not file_url or not file_url.strip():
            raise ValidationError("Receipt file is required")

        with self._uow as uow:
            invoice = _load(uow, invoice_id, customer_id)
            currency = invoice.total_amount.currency
            invoice.require_payment().submit_receipt(
                Receipt(
                    file_url=file_url.strip(),
                    amount=Money.of(amount, currency) if amount is not None else None,
                    notes=notes,
                )
            )
            uow.invoices.save(invoice)
            uow.commit()

        logger.info("Payment receipt submitted for invoice %s", invoice.invoice_number)
        return invoice_to_dto(invoice)


class ApprovePaymentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, admin_id: str) -> InvoiceDTO:
        with self._uow as uow:
            invoice = _load(uow, invoice_id)
            invoice.require_payment().approve(admin_id)
            uow.invoices.save(invoice)
            uow.commit()

        logger.info("Payment for invoice %s approved by %s", invoice.invoice_number, admin_id)
        return invoice_to_dto(invoice)


class RejectPaymentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, admin_id: str, reason: str) -> InvoiceDTO:
        with self._uow as uow:
            invoice = _load(uow, invoice_id)
            invoice.require_payment().reject(admin_id, reason)
            uow.invoices.save(invoice)
            uow.commit()

        logger.warning(
            "Payment for invoice %s rejected by %s: %s",
            invoice.invoice_number, admin_id, reason,
        )
        return invoice_to_dto(invoice)
