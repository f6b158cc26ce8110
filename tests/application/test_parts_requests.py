"""Integration tests for the parts request use cases."""

import pytest

from backoffice.application.create_parts_request import (
    CanRequestPartsHandler,
    CreatePartsRequestHandler,
)
from backoffice.application.list_parts_requests import ListPartsRequestsHandler
from backoffice.application.review_parts_request import (
    ApprovePartsRequestHandler,
    RejectPartsRequestHandler,
)
from backoffice.domain.exceptions import (
    DuplicateRequestError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidStateTransitionError,
    NotAuthorizedError,
)
from backoffice.domain.model.booking import Booking, BookingStatus
from backoffice.domain.model.parts_request import RequestStatus
from backoffice.domain.model.sku import Sku, VariationStock
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption
from tests.fakes import FakeUnitOfWork, InMemoryState

COLOR = VariationOption("color", "Color", ("red", "blue"))


def _setup(booking_status: BookingStatus = BookingStatus.IN_PROGRESS) -> FakeUnitOfWork:
    state = InMemoryState().add(
        Sku(
            id="brk", code="BRK-PAD", name="Brake Pad", unit_price=Money.of("45.00"),
            total_qty=10, variation_schema=[COLOR],
            variation_stock=VariationStock(
                allocations={"color:red": 4, "color:blue": 3}, unallocated=3
            ),
        ),
        Sku(id="oil", code="OIL", name="Engine Oil", unit_price=Money.of("38.00"), total_qty=5),
        Booking(id=1, customer_id="c1", service_id="svc", status=booking_status,
                assigned_mechanic_id="mech-1"),
        Booking(id=2, customer_id="c2", service_id="svc", status=BookingStatus.CONFIRMED,
                assigned_mechanic_id="mech-2"),
    )
    return FakeUnitOfWork(state)


class TestCreateRequest:

    def test_creates_pending_request_without_touching_stock(self):
        uow = _setup()
        dto = CreatePartsRequestHandler(uow).handle(1, "mech-1", "oil", 2, reason="Oil change")
        assert dto.status == "PENDING"
        assert dto.reason == "Oil change"
        assert uow.state.skus["oil"].total_qty == 5

    def test_unassigned_mechanic_not_authorized(self):
        with pytest.raises(NotAuthorizedError):
            CreatePartsRequestHandler(_setup()).handle(1, "mech-2", "oil", 1)

    @pytest.mark.parametrize(
        "status",
        [BookingStatus.PENDING, BookingStatus.COMPLETED, BookingStatus.CANCELLED],
    )
    def test_booking_must_be_active(self, status):
        with pytest.raises(InvalidStateTransitionError, match="CONFIRMED or IN_PROGRESS"):
            CreatePartsRequestHandler(_setup(status)).handle(1, "mech-1", "oil", 1)

    def test_unknown_booking(self):
        with pytest.raises(EntityNotFoundError, match="Booking #42"):
            CreatePartsRequestHandler(_setup()).handle(42, "mech-1", "oil", 1)

    def test_duplicate_pending_rejected(self):
        uow = _setup()
        handler = CreatePartsRequestHandler(uow)
        handler.handle(1, "mech-1", "brk", 1, {"color": "red"})
        with pytest.raises(DuplicateRequestError):
            handler.handle(1, "mech-1", "brk", 2, {"color": "blue"})

    def test_can_request_again_after_rejection(self):
        uow = _setup()
        handler = CreatePartsRequestHandler(uow)
        first = handler.handle(1, "mech-1", "oil", 1)
        RejectPartsRequestHandler(uow).handle(first.id, "admin")
        second = handler.handle(1, "mech-1", "oil", 1)
        assert second.id != first.id

    def test_insufficient_stock(self):
        with pytest.raises(InsufficientStockError):
            CreatePartsRequestHandler(_setup()).handle(1, "mech-1", "oil", 6)

    def test_can_request_parts(self):
        uow = _setup()
        handler = CanRequestPartsHandler(uow)
        assert handler.handle(1, "mech-1")
        assert not handler.handle(1, "mech-2")
        assert not handler.handle(99, "mech-1")
        assert not CanRequestPartsHandler(_setup(BookingStatus.COMPLETED)).handle(1, "mech-1")


class TestReviewRequest:

    def test_approve_deducts_and_records_price(self):
        uow = _setup()
        request = CreatePartsRequestHandler(uow).handle(1, "mech-1", "brk", 5, {"color": "red"})

        dto = ApprovePartsRequestHandler(uow).handle(request.id, "admin")

        assert dto.status == "APPROVED"
        brk = uow.state.skus["brk"]
        assert brk.total_qty == 5
        assert brk.variation_stock.allocations["color:red"] == 0
        stored = uow.state.parts_requests[request.id]
        assert stored.unit_price_at_approval == Money.of("45.00")
        assert stored.reviewed_by == "admin"

    def test_approve_without_stock_leaves_request_pending(self):
        uow = _setup()
        request = CreatePartsRequestHandler(uow).handle(1, "mech-1", "oil", 4)
        uow.state.skus["oil"].deduct(3)

        with pytest.raises(InsufficientStockError):
            ApprovePartsRequestHandler(uow).handle(request.id, "admin")

        assert uow.state.parts_requests[request.id].status == RequestStatus.PENDING
        assert uow.state.skus["oil"].total_qty == 2

    def test_approve_twice_rejected(self):
        uow = _setup()
        request = CreatePartsRequestHandler(uow).handle(1, "mech-1", "oil", 1)
        ApprovePartsRequestHandler(uow).handle(request.id, "admin")
        with pytest.raises(InvalidStateTransitionError):
            ApprovePartsRequestHandler(uow).handle(request.id, "admin")
        assert uow.state.skus["oil"].total_qty == 4

    def test_reject_leaves_stock(self):
        uow = _setup()
        request = CreatePartsRequestHandler(uow).handle(1, "mech-1", "oil", 1)
        dto = RejectPartsRequestHandler(uow).handle(request.id, "admin")
        assert dto.status == "REJECTED"
        assert uow.state.skus["oil"].total_qty == 5


class TestListing:

    def test_lists(self):
        uow = _setup()
        create = CreatePartsRequestHandler(uow)
        r1 = create.handle(1, "mech-1", "oil", 1)
        r2 = create.handle(1, "mech-1", "brk", 1, {"color": "blue"})
        r3 = create.handle(2, "mech-2", "oil", 1)
        RejectPartsRequestHandler(uow).handle(r1.id, "admin")

        listing = ListPartsRequestsHandler(uow)
        assert [r.id for r in listing.for_booking(1)] == [r1.id, r2.id]
        assert [r.id for r in listing.for_mechanic("mech-2")] == [r3.id]
        assert {r.id for r in listing.pending()} == {r2.id, r3.id}
        assert listing.for_booking(1)[1].variation_display == "Color: blue"
