"""CLI commands for customer carts."""

from __future__ import annotations

import click

from backoffice.application.add_to_cart import AddToCartHandler
from backoffice.application.dto import CartDTO
from backoffice.application.get_cart import GetCartHandler
from backoffice.application.update_cart_line import (
    RemoveCartLineHandler,
    UpdateCartLineHandler,
)
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import unit_of_work
from backoffice.infrastructure.cli._common import parse_selection
from backoffice.infrastructure.settings import Settings


def _display_cart(dto: CartDTO) -> None:
    if not dto.lines:
        click.echo(f"Cart for {dto.customer_id} is empty.")
        return

    click.echo(f"Cart for {dto.customer_id}")
    click.echo()
    click.echo(f"  {'#':>4} {'Part':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*57}")
    for line in dto.lines:
        click.echo(
            f"  {line.id:>4} {line.sku_name:<24} {line.quantity:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
        if line.variation_display:
            click.echo(f"  {'':>4} {line.variation_display}")
    click.echo(f"  {'-'*57}")
    click.echo(f"  {'Total (' + str(dto.total_items) + ' items)':<35} {dto.total_amount:>21}")


@click.command("show")
@click.option("--customer", required=True, help="Customer ID.")
@click.pass_obj
def cart_show(settings: Settings, customer: str) -> None:
    """Show a customer's cart."""
    handler = GetCartHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("add")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--sku", "sku_id", required=True, help="Part ID.")
@click.option("--qty", default=1, type=int, show_default=True, help="Quantity.")
@click.option("--variation", "variations", multiple=True, help="Selection as 'id=value'.")
@click.pass_obj
def cart_add(
    settings: Settings,
    customer: str,
    sku_id: str,
    qty: int,
    variations: tuple[str, ...],
) -> None:
    """Add a part to a customer's cart."""
    handler = AddToCartHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer, sku_id, qty, parse_selection(variations))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("update")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--line", "line_id", required=True, type=int, help="Cart line number.")
@click.option("--qty", required=True, type=int, help="New quantity.")
@click.pass_obj
def cart_update(settings: Settings, customer: str, line_id: int, qty: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartLineHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer, line_id, qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--line", "line_id", required=True, type=int, help="Cart line number.")
@click.pass_obj
def cart_remove(settings: Settings, customer: str, line_id: int) -> None:
    """Remove a line from a customer's cart."""
    handler = RemoveCartLineHandler(unit_of_work(settings))

    try:
        dto = handler.handle(customer, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)
