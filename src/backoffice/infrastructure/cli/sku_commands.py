"""CLI commands for the SKU catalog and stock ledger."""

from __future__ import annotations

import click

from backoffice.application.check_dependencies import CheckDependenciesHandler
from backoffice.application.create_sku import CreateSkuHandler
from backoffice.application.delete_sku import RestoreSkuHandler, SoftDeleteSkuHandler
from backoffice.application.dto import SkuDTO
from backoffice.application.reallocate_stock import ReallocateStockHandler
from backoffice.application.show_inventory import ShowInventoryHandler, ShowSkuHandler
from backoffice.application.update_sku import UpdateSkuHandler
from backoffice.application.update_stock import RestockHandler, UpdateStockHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import unit_of_work
from backoffice.infrastructure.cli._common import parse_allocations, parse_schema
from backoffice.infrastructure.settings import Settings


def _summary(dto: SkuDTO) -> str:
    return ", ".join(f"{key}={qty}" for key, qty in dto.stock_summary.items())


def _display_sku(dto: SkuDTO) -> None:
    click.echo(f"{dto.name}  ({dto.code})")
    click.echo(f"ID:        {dto.id}")
    click.echo(f"Price:     {dto.unit_price}")
    click.echo(f"Stock:     {_summary(dto)}")
    click.echo(f"Min level: {dto.min_stock_level}{'  LOW STOCK' if dto.low_stock else ''}")
    if dto.category or dto.brand:
        click.echo(f"Category:  {dto.category or '-'}   Brand: {dto.brand or '-'}")
    if dto.deleted:
        click.echo("Status:    deleted")


@click.command("create")
@click.option("--code", required=True, help="Unique part code.")
@click.option("--name", required=True, help="Unique part name.")
@click.option("--price", required=True, help="Unit price (e.g. 45.00).")
@click.option("--qty", default=0, type=int, show_default=True, help="Initial stock.")
@click.option("--min-stock", default=5, type=int, show_default=True, help="Low-stock threshold.")
@click.option("--option", "options", multiple=True, help="Variation as 'id[:Name]=v1,v2'.")
@click.option("--allocate", "allocations", multiple=True, help="Allocation as 'key=qty'.")
@click.option("--category", default="", help="Category.")
@click.option("--brand", default="", help="Brand.")
@click.option("--description", default="", help="Description.")
@click.pass_obj
def sku_create(
    settings: Settings,
    code: str,
    name: str,
    price: str,
    qty: int,
    min_stock: int,
    options: tuple[str, ...],
    allocations: tuple[str, ...],
    category: str,
    brand: str,
    description: str,
) -> None:
    """Add a new part to the catalog."""
    handler = CreateSkuHandler(unit_of_work(settings), currency=settings.currency)

    try:
        dto = handler.handle(
            code=code,
            name=name,
            unit_price=price,
            total_qty=qty,
            min_stock_level=min_stock,
            variations=parse_schema(options),
            allocations=parse_allocations(allocations) or None,
            description=description,
            category=category,
            brand=brand,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part {dto.id} '{dto.name}' added at {dto.unit_price}")


@click.command("update")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.option("--code", default=None, help="New part code.")
@click.option("--name", default=None, help="New part name.")
@click.option("--price", default=None, help="New unit price.")
@click.option("--min-stock", default=None, type=int, help="New low-stock threshold.")
@click.option("--option", "options", multiple=True, help="Replace variations: 'id[:Name]=v1,v2'.")
@click.option("--no-variations", is_flag=True, default=False, help="Remove all variations.")
@click.option("--allocate", "allocations", multiple=True, help="Allocation as 'key=qty'.")
@click.option("--category", default=None, help="Category.")
@click.option("--brand", default=None, help="Brand.")
@click.option("--description", default=None, help="Description.")
@click.pass_obj
def sku_update(
    settings: Settings,
    sku_id: str,
    code: str | None,
    name: str | None,
    price: str | None,
    min_stock: int | None,
    options: tuple[str, ...],
    no_variations: bool,
    allocations: tuple[str, ...],
    category: str | None,
    brand: str | None,
    description: str | None,
) -> None:
    """Update a part's details.  Unspecified fields keep their values."""
    handler = UpdateSkuHandler(unit_of_work(settings))

    try:
        dto = handler.handle(
            sku_id,
            code=code,
            name=name,
            unit_price=price,
            min_stock_level=min_stock,
            description=description,
            category=category,
            brand=brand,
            variations=parse_schema(options),
            clear_variations=no_variations,
            allocations=parse_allocations(allocations) or None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part {dto.id} updated")
    _display_sku(dto)


@click.command("set-stock")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.option("--qty", required=True, type=int, help="Counted stock level.")
@click.pass_obj
def sku_set_stock(settings: Settings, sku_id: str, qty: int) -> None:
    """Overwrite a part's stock level after a stock take."""
    handler = UpdateStockHandler(unit_of_work(settings))

    try:
        dto = handler.handle(sku_id, qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{dto.name}' set to {dto.total_qty}")


@click.command("restock")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.option("--qty", required=True, type=int, help="Units received.")
@click.pass_obj
def sku_restock(settings: Settings, sku_id: str, qty: int) -> None:
    """Add received units to a part's stock."""
    handler = RestockHandler(unit_of_work(settings))

    try:
        dto = handler.handle(sku_id, qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Restocked '{dto.name}': {_summary(dto)}")


@click.command("allocate")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.option("--allocate", "allocations", multiple=True, help="Allocation as 'key=qty'.")
@click.pass_obj
def sku_allocate(settings: Settings, sku_id: str, allocations: tuple[str, ...]) -> None:
    """Split a varied part's stock across its variations.

    Omitting --allocate returns everything to the unallocated pool.
    """
    handler = ReallocateStockHandler(unit_of_work(settings))

    try:
        dto = handler.handle(sku_id, parse_allocations(allocations))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{dto.name}': {_summary(dto)}")


@click.command("delete")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.pass_obj
def sku_delete(settings: Settings, sku_id: str) -> None:
    """Soft delete a part.  Orders and requests keep referring to it."""
    uow = unit_of_work(settings)

    try:
        deps = CheckDependenciesHandler(uow).handle(sku_id)
        SoftDeleteSkuHandler(uow).handle(sku_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part {sku_id} deleted")
    if deps.has_dependencies:
        click.echo(f"History kept: {deps.description}")


@click.command("restore")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.pass_obj
def sku_restore(settings: Settings, sku_id: str) -> None:
    """Restore a soft-deleted part."""
    handler = RestoreSkuHandler(unit_of_work(settings))

    try:
        handler.handle(sku_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part {sku_id} restored")


@click.command("deps")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.pass_obj
def sku_deps(settings: Settings, sku_id: str) -> None:
    """Show what still references a part."""
    handler = CheckDependenciesHandler(unit_of_work(settings))

    try:
        deps = handler.handle(sku_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not deps.has_dependencies:
        click.echo("No dependencies.")
        return
    click.echo(f"Referenced by {deps.description}")


@click.command("show")
@click.option("--id", "sku_id", required=True, help="Part ID.")
@click.pass_obj
def sku_show(settings: Settings, sku_id: str) -> None:
    """Show a part with its stock breakdown."""
    handler = ShowSkuHandler(unit_of_work(settings))

    try:
        dto = handler.handle(sku_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_sku(dto)


@click.command("list")
@click.option("--low-stock", is_flag=True, default=False, help="Only parts at or below threshold.")
@click.option("--deleted", is_flag=True, default=False, help="Only soft-deleted parts.")
@click.pass_obj
def sku_list(settings: Settings, low_stock: bool, deleted: bool) -> None:
    """List parts in the catalog."""
    handler = ShowInventoryHandler(unit_of_work(settings))
    skus = handler.handle(low_stock_only=low_stock, deleted_only=deleted)

    if not skus:
        click.echo("No parts found.")
        return

    click.echo(f"{'Code':<12} {'Name':<24} {'Price':>10} {'Stock':>6}  ID")
    click.echo("-" * 78)
    for s in skus:
        flag = " *" if s.low_stock else ""
        click.echo(
            f"{s.code:<12} {s.name:<24} {s.unit_price:>10} {s.total_qty:>6}{flag:<2} {s.id}"
        )
