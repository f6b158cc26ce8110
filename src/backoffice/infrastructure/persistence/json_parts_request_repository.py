"""JSON-backed implementation of PartsRequestRepository."""

from __future__ import annotations

from datetime import datetime

from backoffice.domain.model.parts_request import PartsRequest, RequestStatus
from backoffice.domain.model.value_objects import Quantity
from backoffice.domain.repository.parts_request_repository import (
    PartsRequestRepository,
)
from backoffice.infrastructure.persistence.json_order_repository import (
    money_from_raw,
    money_to_raw,
)


class JsonPartsRequestRepository(PartsRequestRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- PartsRequestRepository interface -------------------------------------

    def next_id(self) -> int:
        return max((r["id"] for r in self._load_raw()), default=0) + 1

    def get_by_id(self, request_id: int) -> PartsRequest | None:
        for raw in self._load_raw():
            if raw["id"] == request_id:
                return self._to_domain(raw)
        return None

    def list_for_booking(self, booking_id: int) -> list[PartsRequest]:
        requests = [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["booking_id"] == booking_id
        ]
        return sorted(requests, key=lambda r: (r.requested_at, r.id))

    def list_for_mechanic(self, mechanic_id: str) -> list[PartsRequest]:
        requests = [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["mechanic_id"] == mechanic_id
        ]
        return sorted(requests, key=lambda r: (r.requested_at, r.id), reverse=True)

    def list_by_status(self, status: RequestStatus) -> list[PartsRequest]:
        requests = [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["status"] == status.value
        ]
        return sorted(requests, key=lambda r: (r.requested_at, r.id), reverse=True)

    def count_for_sku(self, sku_id: str) -> int:
        return sum(1 for raw in self._load_raw() if raw["sku_id"] == sku_id)

    def save(self, request: PartsRequest) -> None:
        requests = self._load_raw()

        if request.id is None:
            request.id = self.next_id()

        for i, raw in enumerate(requests):
            if raw["id"] == request.id:
                requests[i] = self._to_raw(request)
                break
        else:
            requests.append(self._to_raw(request))

        self._persist_raw(requests)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(request: PartsRequest) -> dict:
        return {
            "id": request.id,
            "booking_id": request.booking_id,
            "mechanic_id": request.mechanic_id,
            "sku_id": request.sku_id,
            "sku_name": request.sku_name,
            "quantity": request.quantity.value,
            "selected_variation": dict(request.selected_variation),
            "reason": request.reason,
            "status": request.status.value,
            "requested_at": request.requested_at.isoformat(),
            "reviewed_by": request.reviewed_by,
            "reviewed_at": request.reviewed_at.isoformat() if request.reviewed_at else None,
            "unit_price_at_approval": money_to_raw(request.unit_price_at_approval),
        }

    @staticmethod
    def _to_domain(raw: dict) -> PartsRequest:
        reviewed_at = raw.get("reviewed_at")
        return PartsRequest(
            id=raw["id"],
            booking_id=raw["booking_id"],
            mechanic_id=raw["mechanic_id"],
            sku_id=raw["sku_id"],
            sku_name=raw["sku_name"],
            quantity=Quantity(raw["quantity"]),
            selected_variation=dict(raw.get("selected_variation") or {}),
            reason=raw.get("reason", ""),
            status=RequestStatus(raw["status"]),
            requested_at=datetime.fromisoformat(raw["requested_at"]),
            reviewed_by=raw.get("reviewed_by"),
            reviewed_at=datetime.fromisoformat(reviewed_at) if reviewed_at else None,
            unit_price_at_approval=money_from_raw(raw.get("unit_price_at_approval")),
        )

    # --- Record helpers -------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._records

    def _persist_raw(self, requests: list[dict]) -> None:
        if requests is not self._records:
            self._records[:] = requests
