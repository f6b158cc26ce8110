"""Option parsing helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.variation import VariationOption


def parse_selection(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``--variation color=red`` options into a selection."""
    selection: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid variation '{pair}'. Expected 'id=value'."
            )
        variation_id, value = pair.split("=", 1)
        selection[variation_id.strip()] = value.strip()
    return selection


def parse_schema(entries: tuple[str, ...]) -> list[VariationOption] | None:
    """Parse ``--option 'color:Color=red,blue'`` into a variation schema.

    The display name is optional (``color=red,blue``); a trailing ``?``
    on the id marks the option as not required.
    """
    options: list[VariationOption] = []
    for raw in entries:
        if "=" not in raw:
            raise click.BadParameter(
                f"Invalid option '{raw}'. Expected 'id[:Name]=value,value'."
            )
        head, values = raw.split("=", 1)
        variation_id, _, name = head.partition(":")
        required = not variation_id.endswith("?")
        variation_id = variation_id.rstrip("?").strip()
        try:
            options.append(
                VariationOption(
                    variation_id=variation_id,
                    name=name.strip() or variation_id.replace("_", " ").title(),
                    allowed_values=tuple(v.strip() for v in values.split(",") if v.strip()),
                    required=required,
                )
            )
        except ValidationError as exc:
            raise click.BadParameter(str(exc))
    return options or None


def parse_allocations(entries: tuple[str, ...]) -> dict[str, int]:
    """Parse ``--allocate 'color:red=4'`` into allocations by variation key."""
    allocations: dict[str, int] = {}
    for raw in entries:
        if "=" not in raw:
            raise click.BadParameter(
                f"Invalid allocation '{raw}'. Expected 'key=quantity'."
            )
        key, qty_str = raw.rsplit("=", 1)
        try:
            allocations[key.strip()] = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for variation '{key}'."
            )
    return allocations
