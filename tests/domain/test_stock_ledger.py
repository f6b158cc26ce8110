"""Unit tests for the StockLedger domain service."""

import pytest

from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidVariationSelectionError,
)
from backoffice.domain.model.sku import Sku, VariationStock
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption
from backoffice.domain.service.stock_ledger import StockDraw, StockLedger
from tests.fakes import FakeSkuRepository

COLOR = VariationOption("color", "Color", ("red", "blue"))


def _repo() -> tuple[FakeSkuRepository, dict[str, Sku]]:
    store = {
        "brk": Sku(
            id="brk", code="BRK-PAD", name="Brake Pad", unit_price=Money.of("45.00"),
            total_qty=10, variation_schema=[COLOR],
            variation_stock=VariationStock(
                allocations={"color:red": 4, "color:blue": 3}, unallocated=3
            ),
        ),
        "oil": Sku(
            id="oil", code="OIL", name="Engine Oil", unit_price=Money.of("38.00"),
            total_qty=5,
        ),
    }
    return FakeSkuRepository(store), store


class TestCheckSelection:

    def test_varied_sku_requires_selection(self):
        repo, _ = _repo()
        sku = repo.get_by_id("brk")
        with pytest.raises(InvalidVariationSelectionError, match="required"):
            StockLedger.check_selection(sku, {})

    def test_plain_sku_rejects_selection(self):
        repo, _ = _repo()
        with pytest.raises(InvalidVariationSelectionError):
            StockLedger.check_selection(repo.get_by_id("oil"), {"color": "red"})

    def test_returns_canonical_key(self):
        repo, _ = _repo()
        assert StockLedger.check_selection(repo.get_by_id("brk"), {"color": "red"}) == "color:red"


class TestEnsureAvailable:

    def test_enough(self):
        repo, _ = _repo()
        ledger = StockLedger(repo)
        assert ledger.ensure_available(repo.get_by_id("brk"), {"color": "red"}, 7) == "color:red"

    def test_not_enough(self):
        repo, _ = _repo()
        ledger = StockLedger(repo)
        with pytest.raises(InsufficientStockError) as exc_info:
            ledger.ensure_available(repo.get_by_id("brk"), {"color": "blue"}, 7)
        assert exc_info.value.available == 6

    def test_deleted_sku_not_found(self):
        repo, store = _repo()
        store["oil"].mark_deleted()
        with pytest.raises(EntityNotFoundError):
            StockLedger(repo).get_live_sku("oil")


class TestDeductLines:

    def test_deducts_every_line(self):
        repo, store = _repo()
        StockLedger(repo).deduct_lines([
            StockDraw("brk", 2, {"color": "red"}),
            StockDraw("oil", 5),
        ])
        assert store["brk"].total_qty == 8
        assert store["oil"].total_qty == 0

    def test_lines_on_same_sku_compete_for_pool(self):
        repo, store = _repo()
        # red can take 7 alone, blue 6 alone, but together only 10
        with pytest.raises(InsufficientStockError):
            StockLedger(repo).deduct_lines([
                StockDraw("brk", 7, {"color": "red"}),
                StockDraw("brk", 4, {"color": "blue"}),
            ])
        assert store["brk"].total_qty == 10

    def test_failure_on_later_line_saves_nothing(self):
        repo, store = _repo()
        with pytest.raises(InsufficientStockError):
            StockLedger(repo).deduct_lines([
                StockDraw("brk", 2, {"color": "red"}),
                StockDraw("oil", 6),
            ])
        assert store["brk"].total_qty == 10
        assert store["brk"].version == 0

    def test_bumps_version(self):
        repo, store = _repo()
        StockLedger(repo).deduct_lines([StockDraw("oil", 1)])
        assert store["oil"].version == 1
