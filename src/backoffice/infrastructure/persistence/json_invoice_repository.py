"""JSON-backed implementation of InvoiceRepository."""

from __future__ import annotations

from datetime import datetime

from backoffice.domain.model.invoice import Invoice, InvoicePayment, PaymentStatus
from backoffice.domain.repository.invoice_repository import InvoiceRepository
from backoffice.infrastructure.persistence.json_order_repository import (
    money_from_raw,
    money_to_raw,
    receipt_from_raw,
    receipt_to_raw,
)


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- InvoiceRepository interface ------------------------------------------

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        for raw in self._load_raw():
            if raw["id"] == invoice_id:
                return self._to_domain(raw)
        return None

    def get_for_booking(self, booking_id: int) -> Invoice | None:
        for raw in self._load_raw():
            if raw["booking_id"] == booking_id:
                return self._to_domain(raw)
        return None

    def list_for_customer(self, customer_id: str) -> list[Invoice]:
        invoices = [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["customer_id"] == customer_id
        ]
        return sorted(invoices, key=lambda i: (i.generated_at, i.id), reverse=True)

    def count_with_prefix(self, prefix: str) -> int:
        return sum(
            1 for raw in self._load_raw() if raw["invoice_number"].startswith(prefix)
        )

    def number_exists(self, invoice_number: str) -> bool:
        return any(raw["invoice_number"] == invoice_number for raw in self._load_raw())

    def save(self, invoice: Invoice) -> None:
        invoices = self._load_raw()

        if invoice.id is None:
            invoice.id = max((r["id"] for r in invoices), default=0) + 1

        for i, raw in enumerate(invoices):
            if raw["id"] == invoice.id:
                invoices[i] = self._to_raw(invoice)
                break
        else:
            invoices.append(self._to_raw(invoice))

        self._persist_raw(invoices)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(invoice: Invoice) -> dict:
        payment = None
        if invoice.payment is not None:
            payment = {
                "status": invoice.payment.status.value,
                "receipt": receipt_to_raw(invoice.payment.receipt),
                "created_at": invoice.payment.created_at.isoformat(),
                "updated_at": invoice.payment.updated_at.isoformat(),
            }
        return {
            "id": invoice.id,
            "booking_id": invoice.booking_id,
            "customer_id": invoice.customer_id,
            "invoice_number": invoice.invoice_number,
            "service_amount": money_to_raw(invoice.service_amount),
            "parts_amount": money_to_raw(invoice.parts_amount),
            "total_amount": money_to_raw(invoice.total_amount),
            "generated_at": invoice.generated_at.isoformat(),
            "pdf_url": invoice.pdf_url,
            "payment": payment,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Invoice:
        payment = None
        if raw.get("payment") is not None:
            p = raw["payment"]
            payment = InvoicePayment(
                status=PaymentStatus(p["status"]),
                receipt=receipt_from_raw(p.get("receipt")),
                created_at=datetime.fromisoformat(p["created_at"]),
                updated_at=datetime.fromisoformat(p["updated_at"]),
            )
        # Stored amounts are authoritative; the total is not recomputed.
        return Invoice(
            id=raw["id"],
            booking_id=raw["booking_id"],
            customer_id=raw["customer_id"],
            invoice_number=raw["invoice_number"],
            service_amount=money_from_raw(raw["service_amount"]),  # type: ignore[arg-type]
            parts_amount=money_from_raw(raw["parts_amount"]),  # type: ignore[arg-type]
            total_amount=money_from_raw(raw["total_amount"]),  # type: ignore[arg-type]
            generated_at=datetime.fromisoformat(raw["generated_at"]),
            pdf_url=raw.get("pdf_url"),
            payment=payment,
        )

    # --- Record helpers -------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._records

    def _persist_raw(self, invoices: list[dict]) -> None:
        if invoices is not self._records:
            self._records[:] = invoices
