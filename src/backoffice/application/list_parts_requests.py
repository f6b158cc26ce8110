"""Application services: parts request queries."""

from __future__ import annotations

from backoffice.application.dto import PartsRequestDTO, request_to_dto, schemas_for
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.parts_request import PartsRequest, RequestStatus
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ListPartsRequestsHandler:
    """Requests for one booking (oldest first), one mechanic or the
    pending review queue (both newest first)."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def for_booking(self, booking_id: int) -> list[PartsRequestDTO]:
        with self._uow as uow:
            return self._to_dtos(uow, uow.parts_requests.list_for_booking(booking_id))

    def for_mechanic(self, mechanic_id: str) -> list[PartsRequestDTO]:
        with self._uow as uow:
            return self._to_dtos(uow, uow.parts_requests.list_for_mechanic(mechanic_id))

    def pending(self) -> list[PartsRequestDTO]:
        with self._uow as uow:
            return self._to_dtos(
                uow, uow.parts_requests.list_by_status(RequestStatus.PENDING)
            )

    @staticmethod
    def _to_dtos(uow: UnitOfWork, requests: list[PartsRequest]) -> list[PartsRequestDTO]:
        schemas = schemas_for(uow.skus, (r.sku_id for r in requests))
        return [request_to_dto(r, schemas) for r in requests]


class ShowPartsRequestHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, request_id: int) -> PartsRequestDTO:
        with self._uow as uow:
            request = uow.parts_requests.get_by_id(request_id)
            if request is None:
                raise EntityNotFoundError(f"Parts request #{request_id} not found")
            return request_to_dto(request, schemas_for(uow.skus, [request.sku_id]))
