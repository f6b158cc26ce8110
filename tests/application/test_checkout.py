"""Integration tests for checkout (CreateOrder).

Checkout deducts stock for every cart line, creates the order and
clears the cart in a single unit of work.
"""

import threading

import pytest

from backoffice.application.add_to_cart import AddToCartHandler
from backoffice.application.create_order import CreateOrderHandler
from backoffice.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    InsufficientStockError,
)
from backoffice.domain.model.cart import Cart, CartLine
from backoffice.domain.model.sku import Sku, VariationStock
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption
from tests.fakes import FakeUnitOfWork, InMemoryState

COLOR = VariationOption("color", "Color", ("red", "blue"))


def _setup() -> FakeUnitOfWork:
    state = InMemoryState().add(
        Sku(
            id="brk", code="BRK-PAD", name="Brake Pad", unit_price=Money.of("45.00"),
            total_qty=10, variation_schema=[COLOR],
            variation_stock=VariationStock(
                allocations={"color:red": 4, "color:blue": 3}, unallocated=3
            ),
        ),
        Sku(id="oil", code="OIL", name="Engine Oil", unit_price=Money.of("38.00"), total_qty=5),
    )
    return FakeUnitOfWork(state)


class TestCheckoutHappyPath:

    def test_creates_order_and_deducts_stock(self):
        uow = _setup()
        add = AddToCartHandler(uow)
        add.handle("c1", "brk", 5, {"color": "red"})
        add.handle("c1", "oil", 2)

        dto = CreateOrderHandler(uow).handle("c1")

        assert dto.id == 1
        assert dto.status == "PENDING"
        assert dto.total == "RM301.00"
        brk = uow.state.skus["brk"]
        assert brk.total_qty == 5
        assert brk.variation_stock.allocations["color:red"] == 0
        assert brk.variation_stock.unallocated == 2
        assert uow.state.skus["oil"].total_qty == 3

    def test_clears_cart(self):
        uow = _setup()
        AddToCartHandler(uow).handle("c1", "oil", 1)
        CreateOrderHandler(uow).handle("c1")
        assert uow.state.carts["c1"].is_empty

    def test_uses_price_snapshot_from_cart(self):
        uow = _setup()
        AddToCartHandler(uow).handle("c1", "oil", 1)
        uow.state.skus["oil"].unit_price = Money.of("50.00")

        dto = CreateOrderHandler(uow).handle("c1")

        assert dto.lines[0].unit_price == "RM38.00"

    def test_records_selected_variation(self):
        uow = _setup()
        AddToCartHandler(uow).handle("c1", "brk", 1, {"color": "blue"})
        CreateOrderHandler(uow).handle("c1")
        assert uow.state.orders[1].lines[0].selected_variation == {"color": "blue"}


class TestCheckoutFailures:

    def test_empty_cart_rejected(self):
        with pytest.raises(EmptyCartError):
            CreateOrderHandler(_setup()).handle("c1")

    def test_failure_rolls_back_everything(self):
        uow = _setup()
        add = AddToCartHandler(uow)
        add.handle("c1", "brk", 2, {"color": "red"})
        add.handle("c1", "oil", 5)
        # Someone else takes oil between add-to-cart and checkout.
        uow.state.skus["oil"].deduct(3)

        with pytest.raises(InsufficientStockError) as exc_info:
            CreateOrderHandler(uow).handle("c1")

        assert exc_info.value.sku_name == "Engine Oil"
        assert exc_info.value.requested == 5
        assert exc_info.value.available == 2
        assert uow.state.skus["brk"].total_qty == 10
        assert uow.state.skus["oil"].total_qty == 2
        assert uow.state.orders == {}
        assert len(uow.state.carts["c1"].lines) == 2

    def test_deleted_sku_in_cart_fails_checkout(self):
        uow = _setup()
        AddToCartHandler(uow).handle("c1", "oil", 1)
        uow.state.skus["oil"].mark_deleted()
        with pytest.raises(EntityNotFoundError):
            CreateOrderHandler(uow).handle("c1")
        assert uow.state.orders == {}


class TestConcurrentCheckout:

    def test_no_oversell(self):
        state = InMemoryState().add(
            Sku(id="oil", code="OIL", name="Engine Oil", unit_price=Money.of("38.00"),
                total_qty=10),
        )
        customers = [f"c{i}" for i in range(25)]
        for i, customer in enumerate(customers, start=1):
            state.add(
                Cart(
                    customer_id=customer,
                    lines=[CartLine(i, "oil", "Engine Oil", 1, Money.of("38.00"))],
                )
            )

        successes: list[int] = []
        failures: list[Exception] = []
        guard = threading.Lock()

        def checkout(customer: str) -> None:
            # one unit of work per thread, all sharing the same state
            handler = CreateOrderHandler(FakeUnitOfWork(state))
            try:
                dto = handler.handle(customer)
            except InsufficientStockError as exc:
                with guard:
                    failures.append(exc)
            else:
                with guard:
                    successes.append(dto.id)

        threads = [threading.Thread(target=checkout, args=(c,)) for c in customers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(successes) == 10
        assert len(failures) == 15
        assert state.skus["oil"].total_qty == 0
        assert len(state.orders) == 10
        assert len(set(successes)) == 10
