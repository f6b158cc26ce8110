"""PartsRequest aggregate: a mechanic's draw of stock against a booking.

Unlike orders, requests pass an approval gate: stock moves only when an
admin approves, never when the request is filed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backoffice.domain.exceptions import InvalidStateTransitionError
from backoffice.domain.model import variation
from backoffice.domain.model.value_objects import Money, Quantity


class RequestStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PartsRequest:

    id: int | None
    booking_id: int
    mechanic_id: str
    sku_id: str
    sku_name: str
    quantity: Quantity
    selected_variation: dict[str, str] = field(default_factory=dict)
    reason: str = ""
    status: RequestStatus = RequestStatus.PENDING
    requested_at: datetime = field(default_factory=_now)
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    unit_price_at_approval: Money | None = None

    @property
    def variation_key(self) -> str:
        return variation.build_key(self.selected_variation)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def approve(self, admin_id: str, unit_price: Money) -> None:
        """PENDING -> APPROVED.

        Stock deduction must happen in the same unit of work, before
        calling this.
        """
        self.ensure_pending("approved")
        self.status = RequestStatus.APPROVED
        self.unit_price_at_approval = unit_price
        self.reviewed_by = admin_id
        self.reviewed_at = _now()

    def reject(self, admin_id: str) -> None:
        self.ensure_pending("rejected")
        self.status = RequestStatus.REJECTED
        self.reviewed_by = admin_id
        self.reviewed_at = _now()

    def ensure_pending(self, verb: str) -> None:
        if not self.is_pending:
            raise InvalidStateTransitionError(
                f"Only pending requests can be {verb} "
                f"(request #{self.id} is {self.status.value})"
            )
