"""Application service: Generate Invoice use case.

Prices a completed booking: the service's base price plus every
approved parts request.  Generation is idempotent; a booking that
already has an invoice gets the stored one back, unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from backoffice.application.dto import InvoiceDTO, invoice_to_dto
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateTransitionError,
)
from backoffice.domain.model.booking import BookingStatus
from backoffice.domain.model.invoice import Invoice, format_invoice_number
from backoffice.domain.model.parts_request import PartsRequest, RequestStatus
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class GenerateInvoiceHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        currency: str = DEFAULT_CURRENCY,
        freeze_parts_price_at_approval: bool = False,
    ) -> None:
        self._uow = uow
        self._currency = currency
        self._freeze_prices = freeze_parts_price_at_approval

    def handle(self, booking_id: int) -> InvoiceDTO:
        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
            if booking is None:
                raise EntityNotFoundError(f"Booking #{booking_id} not found")
            if booking.status != BookingStatus.COMPLETED:
                raise InvalidStateTransitionError(
                    f"Invoices can only be generated for completed bookings "
                    f"(booking #{booking_id} is {booking.status.value})"
                )

            existing = uow.invoices.get_for_booking(booking_id)
            if existing is not None:
                logger.info(
                    "Booking #%s already invoiced as %s", booking_id, existing.invoice_number
                )
                return invoice_to_dto(existing)

            service = uow.services.get_by_id(booking.service_id)
            if service is None:
                raise EntityNotFoundError(f"Service '{booking.service_id}' not found")

            parts_amount = Money.zero(self._currency)
            for request in uow.parts_requests.list_for_booking(booking_id):
                if request.status == RequestStatus.APPROVED:
                    parts_amount = parts_amount + self._price_of(uow, request)

            invoice = Invoice.create(
                booking_id=booking_id,
                customer_id=booking.customer_id,
                invoice_number=self._next_number(uow),
                service_amount=service.base_price,
                parts_amount=parts_amount,
            )
            uow.invoices.save(invoice)
            uow.commit()

        logger.info(
            "Invoice %s generated for booking #%s (total %s)",
            invoice.invoice_number, booking_id, invoice.total_amount,
        )
        return invoice_to_dto(invoice)

    def _price_of(self, uow: UnitOfWork, request: PartsRequest) -> Money:
        """Line amount for one approved request.

        Uses the part's current price unless prices are frozen at
        approval time.  A part that no longer exists at all can only be
        priced from the approval record.
        """
        frozen = request.unit_price_at_approval
        if self._freeze_prices and frozen is not None:
            return frozen * request.quantity.value
        sku = uow.skus.get_by_id(request.sku_id)
        if sku is not None:
            return sku.unit_price * request.quantity.value
        if frozen is not None:
            return frozen * request.quantity.value
        raise EntityNotFoundError(
            f"Cannot price request #{request.id}: part '{request.sku_id}' not found"
        )

    @staticmethod
    def _next_number(uow: UnitOfWork) -> str:
        year = datetime.now(timezone.utc).year
        sequence = uow.invoices.count_with_prefix(f"INV-{year}-") + 1
        number = format_invoice_number(year, sequence)
        while uow.invoices.number_exists(number):
            sequence += 1
            number = format_invoice_number(year, sequence)
        return number
