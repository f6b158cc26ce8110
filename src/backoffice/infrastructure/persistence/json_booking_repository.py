"""JSON-backed implementations of BookingRepository and ServiceRepository."""

from __future__ import annotations

from decimal import Decimal

from backoffice.domain.model.booking import Booking, BookingStatus, ServiceOffering
from backoffice.domain.model.value_objects import DEFAULT_CURRENCY, Money
from backoffice.domain.repository.booking_repository import (
    BookingRepository,
    ServiceRepository,
)


def _upsert(records: list[dict], raw: dict) -> None:
    for i, existing in enumerate(records):
        if existing["id"] == raw["id"]:
            records[i] = raw
            return
    records.append(raw)


class JsonBookingRepository(BookingRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def get_by_id(self, booking_id: int) -> Booking | None:
        for raw in self._records:
            if raw["id"] == booking_id:
                return Booking(
                    id=raw["id"],
                    customer_id=raw["customer_id"],
                    service_id=raw["service_id"],
                    status=BookingStatus(raw["status"]),
                    assigned_mechanic_id=raw.get("assigned_mechanic_id"),
                )
        return None

    def save(self, booking: Booking) -> None:
        _upsert(
            self._records,
            {
                "id": booking.id,
                "customer_id": booking.customer_id,
                "service_id": booking.service_id,
                "status": booking.status.value,
                "assigned_mechanic_id": booking.assigned_mechanic_id,
            },
        )


class JsonServiceRepository(ServiceRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def get_by_id(self, service_id: str) -> ServiceOffering | None:
        for raw in self._records:
            if raw["id"] == service_id:
                return ServiceOffering(
                    id=raw["id"],
                    name=raw["name"],
                    base_price=Money(
                        Decimal(raw["base_price"]), raw.get("currency", DEFAULT_CURRENCY)
                    ),
                )
        return None

    def save(self, service: ServiceOffering) -> None:
        _upsert(
            self._records,
            {
                "id": service.id,
                "name": service.name,
                "base_price": str(service.base_price.amount),
                "currency": service.base_price.currency,
            },
        )
