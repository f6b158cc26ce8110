"""Unit tests for the Order aggregate and its payment review states."""

import pytest

from backoffice.domain.exceptions import InvalidStateTransitionError, ValidationError
from backoffice.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    Receipt,
    ReceiptStatus,
)
from backoffice.domain.model.value_objects import Money, Quantity


def _make_line(name: str = "Brake Pad", qty: int = 1, price: str = "45.00") -> OrderLine:
    """Helper to build a valid order line."""
    return OrderLine(
        sku_id=name.lower().replace(" ", "-"),
        sku_name=name,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _submitted() -> Order:
    order = Order.create("c1", [_make_line()])
    order.id = 1
    order.submit_receipt(Receipt(file_url="receipts/1.jpg"))
    return order


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create("c1", [_make_line(qty=2, price="10.00")])
        assert order.customer_id == "c1"
        assert order.status == OrderStatus.PENDING
        assert order.total == Money.of("20.00")
        assert order.id is None  # assigned by repository

    def test_total_is_sum_of_lines(self):
        order = Order.create("c1", [
            _make_line("Brake Pad", qty=3, price="45.00"),
            _make_line("Oil Filter", qty=2, price="12.50"),
        ])
        assert order.total == Money.of("160.00")

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("c1", [])

    def test_customer_required(self):
        with pytest.raises(ValidationError, match="Customer is required"):
            Order.create("", [_make_line()])


class TestReceiptFlow:

    def test_submit_moves_to_payment_submitted(self):
        order = _submitted()
        assert order.status == OrderStatus.PAYMENT_SUBMITTED
        assert order.has_receipt

    def test_approve(self):
        order = _submitted()
        order.approve("admin")
        assert order.status == OrderStatus.APPROVED
        assert order.receipt.status == ReceiptStatus.APPROVED
        assert order.receipt.reviewed_by == "admin"

    def test_reject_records_reason(self):
        order = _submitted()
        order.reject("admin", "Amount does not match")
        assert order.status == OrderStatus.REJECTED
        assert order.receipt.admin_notes == "Amount does not match"

    def test_reject_requires_reason(self):
        with pytest.raises(ValidationError, match="reason is required"):
            _submitted().reject("admin", "  ")

    def test_resubmit_after_rejection_clears_notes(self):
        order = _submitted()
        order.reject("admin", "Blurry")
        order.submit_receipt(Receipt(file_url="receipts/1-again.jpg"))
        assert order.status == OrderStatus.PAYMENT_SUBMITTED
        assert order.receipt.admin_notes is None
        assert order.receipt.file_url == "receipts/1-again.jpg"

    def test_cannot_approve_without_receipt(self):
        order = Order.create("c1", [_make_line()])
        with pytest.raises(InvalidStateTransitionError, match="expected PAYMENT_SUBMITTED"):
            order.approve("admin")

    def test_cannot_resubmit_while_under_review(self):
        with pytest.raises(InvalidStateTransitionError, match="pending or rejected"):
            _submitted().submit_receipt(Receipt(file_url="x"))

    def test_approved_is_terminal(self):
        order = _submitted()
        order.approve("admin")
        with pytest.raises(InvalidStateTransitionError):
            order.reject("admin", "too late")
        with pytest.raises(InvalidStateTransitionError):
            order.submit_receipt(Receipt(file_url="x"))
