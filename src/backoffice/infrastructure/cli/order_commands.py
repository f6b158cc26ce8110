"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from backoffice.application.create_order import CreateOrderHandler
from backoffice.application.dto import OrderDTO
from backoffice.application.review_order import ApproveOrderHandler, RejectOrderHandler
from backoffice.application.show_order import ListOrdersHandler, ShowOrderHandler
from backoffice.application.submit_receipt import SubmitReceiptHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import unit_of_work
from backoffice.infrastructure.settings import Settings


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.receipt_status:
        click.echo(f"Receipt:  {dto.receipt_status}")
    if dto.admin_notes:
        click.echo(f"Notes:    {dto.admin_notes}")
    click.echo()

    click.echo(f"  {'Part':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*52}")
    for line in dto.lines:
        click.echo(
            f"  {line.sku_name:<24} {line.quantity:>5} {line.unit_price:>10} {line.line_total:>10}"
        )
        if line.variation_display:
            click.echo(f"    {line.variation_display}")
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Order Total':<30} {dto.total:>21}")


@click.command("checkout")
@click.option("--customer", required=True, help="Customer ID.")
@click.pass_obj
def order_checkout(settings: Settings, customer: str) -> None:
    """Turn a customer's cart into an order (deducts stock)."""
    handler = CreateOrderHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("receipt")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--file", "file_url", required=True, help="Receipt file URL or path.")
@click.option("--amount", default=None, help="Amount paid.")
@click.option("--notes", default="", help="Notes for the reviewer.")
@click.pass_obj
def order_receipt(
    settings: Settings,
    customer: str,
    order_id: int,
    file_url: str,
    amount: str | None,
    notes: str,
) -> None:
    """Upload a payment receipt for an order."""
    handler = SubmitReceiptHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer, order_id, file_url, amount=amount, notes=notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Receipt submitted for order #{dto.id} (status={dto.status})")


@click.command("approve")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.pass_obj
def order_approve(settings: Settings, order_id: int, admin: str) -> None:
    """Approve an order's payment receipt."""
    handler = ApproveOrderHandler(unit_of_work(settings))

    try:
        dto = handler.handle(order_id, admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} approved")


@click.command("reject")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.option("--reason", required=True, help="Why the receipt was rejected.")
@click.pass_obj
def order_reject(settings: Settings, order_id: int, admin: str, reason: str) -> None:
    """Reject an order's payment receipt.  The customer may upload again."""
    handler = RejectOrderHandler(unit_of_work(settings))

    try:
        dto = handler.handle(order_id, admin, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} rejected: {reason}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(settings: Settings, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work(settings))

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--customer", default=None, help="Only this customer's orders.")
@click.pass_obj
def order_list(settings: Settings, customer: str | None) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(unit_of_work(settings))
    orders = handler.handle(customer)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Customer':<16} {'Status':<18} {'Total':>12}  Created")
    click.echo("-" * 76)
    for o in orders:
        click.echo(f"{o.id:<6} {o.customer_id:<16} {o.status:<18} {o.total:>12}  {o.created_at}")
