"""Unit tests for the Sku aggregate (stock ledger rules)."""

import pytest

from backoffice.domain.exceptions import (
    InsufficientStockError,
    InvalidStateTransitionError,
    ValidationError,
)
from backoffice.domain.model.sku import Sku, VariationStock
from backoffice.domain.model.value_objects import Money
from backoffice.domain.model.variation import VariationOption

COLOR = VariationOption("color", "Color", ("red", "blue", "black"))


def _plain(qty: int = 10, min_level: int = 5) -> Sku:
    return Sku(
        id="oil",
        code="OIL-5W30",
        name="Engine Oil 5W-30",
        unit_price=Money.of("38.00"),
        total_qty=qty,
        min_stock_level=min_level,
    )


def _brake_pads() -> Sku:
    """BRK-PAD: 10 in stock, red 4, blue 3, 3 unallocated."""
    return Sku(
        id="brk",
        code="BRK-PAD",
        name="Brake Pad",
        unit_price=Money.of("45.00"),
        total_qty=10,
        variation_schema=[COLOR],
        variation_stock=VariationStock(
            allocations={"color:red": 4, "color:blue": 3}, unallocated=3
        ),
    )


def _assert_conserved(sku: Sku) -> None:
    stock = sku.variation_stock
    assert stock is not None
    assert sum(stock.allocations.values()) + stock.unallocated == sku.total_qty


class TestConstruction:

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _plain(qty=-1)

    def test_schema_without_stock_starts_unallocated(self):
        sku = Sku(
            id="x", code="X", name="X", unit_price=Money.of("1"),
            total_qty=7, variation_schema=[COLOR],
        )
        assert sku.variation_stock == VariationStock(unallocated=7)

    def test_mismatched_variation_stock_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            Sku(
                id="x", code="X", name="X", unit_price=Money.of("1"),
                total_qty=5, variation_schema=[COLOR],
                variation_stock=VariationStock(allocations={"color:red": 2}, unallocated=1),
            )

    def test_stock_without_schema_rejected(self):
        with pytest.raises(ValidationError, match="no variation schema"):
            Sku(
                id="x", code="X", name="X", unit_price=Money.of("1"),
                total_qty=1, variation_stock=VariationStock(unallocated=1),
            )


class TestAvailability:

    def test_plain_available_is_total(self):
        assert _plain(qty=12).available_for() == 12

    def test_variation_sees_own_allocation_plus_pool(self):
        sku = _brake_pads()
        assert sku.available_for("color:red") == 7
        assert sku.available_for("color:blue") == 6
        assert sku.available_for("color:black") == 3


class TestDeduct:

    def test_plain_deduct(self):
        sku = _plain(qty=10)
        sku.deduct(4)
        assert sku.total_qty == 6

    def test_plain_oversell_rejected(self):
        sku = _plain(qty=2)
        with pytest.raises(InsufficientStockError) as exc_info:
            sku.deduct(3)
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert sku.total_qty == 2

    def test_brake_pad_scenario(self):
        sku = _brake_pads()

        sku.deduct(5, "color:red")

        assert sku.variation_stock.allocations == {"color:red": 0, "color:blue": 3}
        assert sku.variation_stock.unallocated == 2
        assert sku.total_qty == 5
        _assert_conserved(sku)

        with pytest.raises(InsufficientStockError) as exc_info:
            sku.deduct(3, "color:red")
        assert exc_info.value.available == 2
        assert exc_info.value.requested == 3
        assert exc_info.value.variation_key == "color:red"
        assert sku.total_qty == 5

    def test_unallocated_variation_draws_from_pool(self):
        sku = _brake_pads()
        sku.deduct(3, "color:black")
        assert sku.variation_stock.unallocated == 0
        assert "color:black" not in sku.variation_stock.allocations
        assert sku.total_qty == 7
        _assert_conserved(sku)

    def test_own_allocation_used_before_pool(self):
        sku = _brake_pads()
        sku.deduct(2, "color:blue")
        assert sku.variation_stock.allocations["color:blue"] == 1
        assert sku.variation_stock.unallocated == 3

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _plain().deduct(0)

    def test_deleted_sku_cannot_be_drawn(self):
        sku = _plain()
        sku.mark_deleted()
        with pytest.raises(InvalidStateTransitionError):
            sku.deduct(1)


class TestStockEdits:

    def test_restock_lands_in_pool(self):
        sku = _brake_pads()
        sku.add_stock(5)
        assert sku.total_qty == 15
        assert sku.variation_stock.unallocated == 8
        _assert_conserved(sku)

    def test_set_total_recomputes_pool(self):
        sku = _brake_pads()
        sku.set_total_qty(20)
        assert sku.variation_stock.unallocated == 13
        _assert_conserved(sku)

    def test_set_total_below_allocated_rejected(self):
        sku = _brake_pads()
        with pytest.raises(ValidationError, match="reallocate first"):
            sku.set_total_qty(6)
        assert sku.total_qty == 10

    def test_set_total_on_plain(self):
        sku = _plain(qty=3)
        sku.set_total_qty(0)
        assert sku.total_qty == 0

    def test_reallocate(self):
        sku = _brake_pads()
        sku.reallocate({"color:black": 6, "color:red": 1})
        assert sku.variation_stock.allocations == {"color:black": 6, "color:red": 1}
        assert sku.variation_stock.unallocated == 3
        _assert_conserved(sku)

    def test_reallocate_canonicalizes_keys(self):
        sku = Sku(
            id="x", code="X", name="X", unit_price=Money.of("1"), total_qty=5,
            variation_schema=[COLOR, VariationOption("size", "Size", ("S", "M"))],
        )
        sku.reallocate({"size:S,color:red": 2})
        assert sku.variation_stock.allocations == {"color:red,size:S": 2}

    def test_reallocate_over_total_rejected(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            _brake_pads().reallocate({"color:red": 8, "color:blue": 3})

    def test_reallocate_unknown_value_rejected(self):
        with pytest.raises(ValidationError, match="not a valid variation"):
            _brake_pads().reallocate({"color:green": 1})

    def test_reallocate_plain_rejected(self):
        with pytest.raises(ValidationError, match="non-varied"):
            _plain().reallocate({"color:red": 1})


class TestLowStock:

    def test_plain_threshold_inclusive(self):
        assert _plain(qty=5, min_level=5).is_low_stock()
        assert not _plain(qty=6, min_level=5).is_low_stock()

    def test_proportional_threshold_per_bucket(self):
        # two buckets -> threshold max(1, 5 // 2) == 2
        sku = _brake_pads()
        assert not sku.is_low_stock()
        sku.deduct(2, "color:blue")  # blue 1
        assert sku.is_low_stock()

    def test_pool_counts_as_a_bucket(self):
        sku = _brake_pads()
        sku.reallocate({"color:red": 4, "color:blue": 4})  # pool 2
        assert sku.is_low_stock()

    def test_varied_without_allocations_uses_plain_rule(self):
        sku = Sku(
            id="x", code="X", name="X", unit_price=Money.of("1"),
            total_qty=6, min_stock_level=5, variation_schema=[COLOR],
        )
        assert not sku.is_low_stock()
        sku.set_total_qty(5)
        assert sku.is_low_stock()


class TestSummaryAndLifecycle:

    def test_summary_for_varied(self):
        assert _brake_pads().stock_summary() == {
            "color:red": 4, "color:blue": 3, "unallocated": 3, "total": 10,
        }

    def test_summary_for_plain(self):
        assert _plain(qty=4).stock_summary() == {"total": 4}

    def test_delete_and_restore(self):
        sku = _plain()
        sku.mark_deleted()
        assert sku.deleted and not sku.active
        sku.restore()
        assert not sku.deleted and sku.active

    def test_double_delete_rejected(self):
        sku = _plain()
        sku.mark_deleted()
        with pytest.raises(InvalidStateTransitionError, match="already deleted"):
            sku.mark_deleted()

    def test_restore_live_rejected(self):
        with pytest.raises(InvalidStateTransitionError, match="not deleted"):
            _plain().restore()

    def test_removing_schema_drops_variation_stock(self):
        sku = _brake_pads()
        sku.redefine_variations(None)
        assert sku.variation_stock is None
        assert sku.total_qty == 10
