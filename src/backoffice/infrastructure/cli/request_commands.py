"""CLI commands for mechanics' parts requests."""

from __future__ import annotations

import click

from backoffice.application.create_parts_request import (
    CanRequestPartsHandler,
    CreatePartsRequestHandler,
)
from backoffice.application.dto import PartsRequestDTO
from backoffice.application.list_parts_requests import (
    ListPartsRequestsHandler,
    ShowPartsRequestHandler,
)
from backoffice.application.review_parts_request import (
    ApprovePartsRequestHandler,
    RejectPartsRequestHandler,
)
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import unit_of_work
from backoffice.infrastructure.cli._common import parse_selection
from backoffice.infrastructure.settings import Settings


def _echo_row(dto: PartsRequestDTO) -> None:
    part = dto.sku_name
    if dto.variation_display:
        part = f"{part} ({dto.variation_display})"
    click.echo(
        f"{dto.id:<6} {dto.booking_id:<8} {dto.mechanic_id:<12} {dto.status:<9} "
        f"{dto.quantity:>4}  {part}"
    )


@click.command("create")
@click.option("--booking", "booking_id", required=True, type=int, help="Booking ID.")
@click.option("--mechanic", required=True, help="Requesting mechanic ID.")
@click.option("--sku", "sku_id", required=True, help="Part ID.")
@click.option("--qty", required=True, type=int, help="Quantity needed.")
@click.option("--variation", "variations", multiple=True, help="Selection as 'id=value'.")
@click.option("--reason", default="", help="What the part is for.")
@click.pass_obj
def request_create(
    settings: Settings,
    booking_id: int,
    mechanic: str,
    sku_id: str,
    qty: int,
    variations: tuple[str, ...],
    reason: str,
) -> None:
    """File a parts request against a booking."""
    handler = CreatePartsRequestHandler(unit_of_work(settings))

    try:
        dto = handler.handle(
            booking_id, mechanic, sku_id, qty, parse_selection(variations), reason
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Request #{dto.id} filed: {dto.quantity} x {dto.sku_name} (status={dto.status})")


@click.command("approve")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.pass_obj
def request_approve(settings: Settings, request_id: int, admin: str) -> None:
    """Approve a request and deduct its stock."""
    handler = ApprovePartsRequestHandler(unit_of_work(settings))

    try:
        dto = handler.handle(request_id, admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Request #{dto.id} approved: {dto.quantity} x {dto.sku_name} deducted")


@click.command("reject")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.option("--admin", required=True, help="Reviewing admin ID.")
@click.pass_obj
def request_reject(settings: Settings, request_id: int, admin: str) -> None:
    """Reject a request.  Stock is untouched."""
    handler = RejectPartsRequestHandler(unit_of_work(settings))

    try:
        dto = handler.handle(request_id, admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Request #{dto.id} rejected")


@click.command("show")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.pass_obj
def request_show(settings: Settings, request_id: int) -> None:
    """Show one parts request."""
    handler = ShowPartsRequestHandler(unit_of_work(settings))

    try:
        dto = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Request #{dto.id}  (status={dto.status})")
    click.echo(f"Booking:   #{dto.booking_id}")
    click.echo(f"Mechanic:  {dto.mechanic_id}")
    click.echo(f"Part:      {dto.quantity} x {dto.sku_name}")
    if dto.variation_display:
        click.echo(f"Variation: {dto.variation_display}")
    if dto.reason:
        click.echo(f"Reason:    {dto.reason}")
    click.echo(f"Requested: {dto.requested_at}")


@click.command("list")
@click.option("--booking", "booking_id", default=None, type=int, help="Requests on a booking.")
@click.option("--mechanic", default=None, help="Requests by a mechanic.")
@click.option("--pending", is_flag=True, default=False, help="Requests awaiting review.")
@click.pass_obj
def request_list(
    settings: Settings,
    booking_id: int | None,
    mechanic: str | None,
    pending: bool,
) -> None:
    """List parts requests (exactly one filter)."""
    chosen = sum([booking_id is not None, mechanic is not None, pending])
    if chosen != 1:
        raise click.UsageError("Pass exactly one of --booking, --mechanic or --pending")

    handler = ListPartsRequestsHandler(unit_of_work(settings))
    if booking_id is not None:
        requests = handler.for_booking(booking_id)
    elif mechanic is not None:
        requests = handler.for_mechanic(mechanic)
    else:
        requests = handler.pending()

    if not requests:
        click.echo("No requests found.")
        return

    click.echo(f"{'ID':<6} {'Booking':<8} {'Mechanic':<12} {'Status':<9} {'Qty':>4}  Part")
    click.echo("-" * 64)
    for dto in requests:
        _echo_row(dto)


@click.command("can-request")
@click.option("--booking", "booking_id", required=True, type=int, help="Booking ID.")
@click.option("--mechanic", required=True, help="Mechanic ID.")
@click.pass_obj
def request_can_request(settings: Settings, booking_id: int, mechanic: str) -> None:
    """Tell whether a mechanic may request parts on a booking."""
    allowed = CanRequestPartsHandler(unit_of_work(settings)).handle(booking_id, mechanic)
    click.echo("yes" if allowed else "no")
