"""Abstract repository for the Invoice aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None:
        """Return an invoice by its ID, or None if not found."""

    @abstractmethod
    def get_for_booking(self, booking_id: int) -> Invoice | None:
        """Return the booking's invoice, or None if none was generated."""

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> list[Invoice]:
        """Return a customer's invoices, newest first."""

    @abstractmethod
    def count_with_prefix(self, prefix: str) -> int:
        """Count invoices whose number starts with ``prefix``."""

    @abstractmethod
    def number_exists(self, invoice_number: str) -> bool:
        """True if the invoice number is already taken."""

    @abstractmethod
    def save(self, invoice: Invoice) -> None:
        """Persist a new or updated invoice (assigns an ID to new ones)."""
