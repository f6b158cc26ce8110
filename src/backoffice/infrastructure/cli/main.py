from pathlib import Path

import click

from backoffice.infrastructure.bootstrap import load_settings
from backoffice.infrastructure.cli.cart_commands import (
    cart_add,
    cart_remove,
    cart_show,
    cart_update,
)
from backoffice.infrastructure.cli.invoice_commands import (
    invoice_approve_payment,
    invoice_attach_pdf,
    invoice_generate,
    invoice_list,
    invoice_pay,
    invoice_receipt,
    invoice_reject_payment,
    invoice_show,
)
from backoffice.infrastructure.cli.order_commands import (
    order_approve,
    order_checkout,
    order_list,
    order_receipt,
    order_reject,
    order_show,
)
from backoffice.infrastructure.cli.request_commands import (
    request_approve,
    request_can_request,
    request_create,
    request_list,
    request_reject,
    request_show,
)
from backoffice.infrastructure.cli.sku_commands import (
    sku_allocate,
    sku_create,
    sku_delete,
    sku_deps,
    sku_list,
    sku_restock,
    sku_restore,
    sku_set_stock,
    sku_show,
    sku_update,
)
from backoffice.infrastructure.logging_setup import setup_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Data directory (overrides BACKOFFICE_DATA_DIR).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG to stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, verbose: bool) -> None:
    """Workshop back office: parts inventory, orders, requests and invoices."""
    settings = load_settings(data_dir)
    setup_logging(settings, verbose)
    ctx.obj = settings


@cli.group()
def sku() -> None:
    """Manage parts and stock."""


@cli.group()
def cart() -> None:
    """Manage customer carts."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def request() -> None:
    """Manage mechanics' parts requests."""


@cli.group()
def invoice() -> None:
    """Manage booking invoices."""


# Register subcommands
sku.add_command(sku_allocate)
sku.add_command(sku_create)
sku.add_command(sku_delete)
sku.add_command(sku_deps)
sku.add_command(sku_list)
sku.add_command(sku_restock)
sku.add_command(sku_restore)
sku.add_command(sku_set_stock)
sku.add_command(sku_show)
sku.add_command(sku_update)
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_approve)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_receipt)
order.add_command(order_reject)
order.add_command(order_show)
request.add_command(request_approve)
request.add_command(request_can_request)
request.add_command(request_create)
request.add_command(request_list)
request.add_command(request_reject)
request.add_command(request_show)
invoice.add_command(invoice_approve_payment)
invoice.add_command(invoice_attach_pdf)
invoice.add_command(invoice_generate)
invoice.add_command(invoice_list)
invoice.add_command(invoice_pay)
invoice.add_command(invoice_receipt)
invoice.add_command(invoice_reject_payment)
invoice.add_command(invoice_show)
