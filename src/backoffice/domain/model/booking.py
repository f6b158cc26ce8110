"""Booking and service offering: read-only collaborators of the core.

Bookings are managed elsewhere; the core only needs to know who owns a
booking, which mechanic is assigned, where it is in its lifecycle and
which service it is for.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from backoffice.domain.model.value_objects import Money


class BookingStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


PARTS_REQUEST_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS)


@dataclass
class Booking:
    id: int
    customer_id: str
    service_id: str
    status: BookingStatus = BookingStatus.PENDING
    assigned_mechanic_id: str | None = None

    @property
    def accepts_parts_requests(self) -> bool:
        return self.status in PARTS_REQUEST_STATUSES


@dataclass
class ServiceOffering:
    """A bookable workshop service with its fixed labour price."""

    id: str
    name: str
    base_price: Money
