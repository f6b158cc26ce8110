"""Abstract repositories for bookings and services.

Both aggregates are owned by the booking/catalog side of the system; the
core only reads them (``save`` exists for seeding and for the outer
layers that manage bookings).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.booking import Booking, ServiceOffering


class BookingRepository(ABC):

    @abstractmethod
    def get_by_id(self, booking_id: int) -> Booking | None:
        """Return a booking by its ID, or None if not found."""

    @abstractmethod
    def save(self, booking: Booking) -> None:
        """Persist a new or updated booking."""


class ServiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, service_id: str) -> ServiceOffering | None:
        """Return a service offering by its ID, or None if not found."""

    @abstractmethod
    def save(self, service: ServiceOffering) -> None:
        """Persist a new or updated service offering."""
