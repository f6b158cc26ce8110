"""Abstract repository for the PartsRequest aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.parts_request import PartsRequest, RequestStatus


class PartsRequestRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique request ID."""

    @abstractmethod
    def get_by_id(self, request_id: int) -> PartsRequest | None:
        """Return a request by its ID, or None if not found."""

    @abstractmethod
    def list_for_booking(self, booking_id: int) -> list[PartsRequest]:
        """Return a booking's requests, oldest first."""

    @abstractmethod
    def list_for_mechanic(self, mechanic_id: str) -> list[PartsRequest]:
        """Return a mechanic's requests, newest first."""

    @abstractmethod
    def list_by_status(self, status: RequestStatus) -> list[PartsRequest]:
        """Return requests in a status, newest first."""

    @abstractmethod
    def count_for_sku(self, sku_id: str) -> int:
        """Count requests that reference a SKU."""

    @abstractmethod
    def save(self, request: PartsRequest) -> None:
        """Persist a new or updated request (assigns an ID to new ones)."""
