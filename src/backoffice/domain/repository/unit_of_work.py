"""Unit of Work: the transaction boundary for every use case.

Handlers read, mutate and save aggregates through the repositories
exposed here, then call ``commit()``.  Leaving the ``with`` block
without committing, or because of an exception, discards every change
made inside it, so multi-aggregate operations (checkout deducts several
SKUs, creates an order and clears a cart) are all-or-nothing.

Implementations also serialize access to shared state for the lifetime
of the block so that read-check-write sequences on stock are atomic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from backoffice.domain.repository.booking_repository import (
    BookingRepository,
    ServiceRepository,
)
from backoffice.domain.repository.cart_repository import CartRepository
from backoffice.domain.repository.invoice_repository import InvoiceRepository
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.parts_request_repository import (
    PartsRequestRepository,
)
from backoffice.domain.repository.sku_repository import SkuRepository


class UnitOfWork(ABC):

    skus: SkuRepository
    carts: CartRepository
    orders: OrderRepository
    parts_requests: PartsRequestRepository
    invoices: InvoiceRepository
    bookings: BookingRepository
    services: ServiceRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this unit of work durable, or none."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes (a no-op right after commit)."""

    @abstractmethod
    def _begin(self) -> None:
        """Acquire isolation and load a fresh working state."""

    @abstractmethod
    def _end(self) -> None:
        """Release whatever ``_begin`` acquired."""
