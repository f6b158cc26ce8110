"""Application service: Create Parts Request use case.

A mechanic asks for stock against a booking they are working on.  The
request is recorded as PENDING; stock moves only on admin approval.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import PartsRequestDTO, request_to_dto
from backoffice.domain.exceptions import (
    DuplicateRequestError,
    EntityNotFoundError,
    InvalidStateTransitionError,
    NotAuthorizedError,
)
from backoffice.domain.model.booking import PARTS_REQUEST_STATUSES, Booking
from backoffice.domain.model.parts_request import PartsRequest
from backoffice.domain.model.value_objects import Quantity
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def _check_booking(uow: UnitOfWork, booking_id: int, mechanic_id: str) -> Booking:
    booking = uow.bookings.get_by_id(booking_id)
    if booking is None:
        raise EntityNotFoundError(f"Booking #{booking_id} not found")
    if booking.assigned_mechanic_id != mechanic_id:
        raise NotAuthorizedError(
            f"Mechanic {mechanic_id} is not assigned to booking #{booking_id}"
        )
    if not booking.accepts_parts_requests:
        allowed = " or ".join(s.value for s in PARTS_REQUEST_STATUSES)
        raise InvalidStateTransitionError(
            f"Parts can only be requested for {allowed} bookings "
            f"(booking #{booking_id} is {booking.status.value})"
        )
    return booking


class CreatePartsRequestHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        booking_id: int,
        mechanic_id: str,
        sku_id: str,
        quantity: int,
        selection: dict[str, str] | None = None,
        reason: str = "",
    ) -> PartsRequestDTO:
        qty = Quantity(quantity)

        with self._uow as uow:
            _check_booking(uow, booking_id, mechanic_id)

            ledger = StockLedger(uow.skus)
            sku = ledger.get_live_sku(sku_id)

            for other in uow.parts_requests.list_for_booking(booking_id):
                if other.sku_id == sku.id and other.is_pending:
                    raise DuplicateRequestError(
                        f"A pending request for {sku.name} already exists on "
                        f"booking #{booking_id} (request #{other.id})"
                    )

            ledger.ensure_available(sku, selection, qty.value)

            request = PartsRequest(
                id=None,
                booking_id=booking_id,
                mechanic_id=mechanic_id,
                sku_id=sku.id,
                sku_name=sku.name,
                quantity=qty,
                selected_variation=dict(selection or {}),
                reason=reason,
            )
            uow.parts_requests.save(request)
            uow.commit()

        logger.info(
            "Parts request #%s filed: %d x %s for booking #%s",
            request.id, qty.value, sku.name, booking_id,
        )
        return request_to_dto(request, {sku.id: sku.variation_schema})


class CanRequestPartsHandler:
    """Whether a mechanic may currently file requests on a booking."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, booking_id: int, mechanic_id: str) -> bool:
        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
            return (
                booking is not None
                and booking.assigned_mechanic_id == mechanic_id
                and booking.accepts_parts_requests
            )

