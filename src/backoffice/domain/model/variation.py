"""Variation codec: pure helpers for SKU variation selections.

A selection maps variation ids to chosen values, e.g.
``{"color": "red", "size": "M"}``.  Stock allocations are keyed by the
canonical form of a selection: entries sorted by id and joined as
``"color:red,size:M"``.  The empty selection has the empty key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from backoffice.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = ","
VALUE_SEPARATOR = ":"
OPTION_TYPES = ("dropdown", "radio", "checkbox")


@dataclass(frozen=True)
class VariationOption:
    """One axis of a SKU's variation schema (e.g. Color or Size)."""

    variation_id: str
    name: str
    allowed_values: tuple[str, ...] = field(default_factory=tuple)
    type: str = "dropdown"
    required: bool = True

    def __post_init__(self) -> None:
        if not self.variation_id or not self.variation_id.strip():
            raise ValidationError("Variation id is required")
        if not self.name or not self.name.strip():
            raise ValidationError(f"Variation '{self.variation_id}' needs a name")
        if self.type not in OPTION_TYPES:
            raise ValidationError(
                f"Unknown variation type '{self.type}' "
                f"(expected one of {', '.join(OPTION_TYPES)})"
            )
        if not self.allowed_values:
            raise ValidationError(
                f"Variation '{self.variation_id}' must list at least one value"
            )
        # The key codec cannot carry its own separators.
        for token in (self.variation_id, *self.allowed_values):
            if PAIR_SEPARATOR in token or VALUE_SEPARATOR in token:
                raise ValidationError(
                    f"Variation ids and values may not contain "
                    f"'{PAIR_SEPARATOR}' or '{VALUE_SEPARATOR}': {token!r}"
                )


def build_key(selection: Mapping[str, str] | None) -> str:
    """Return the canonical key for *selection* (``""`` when empty)."""
    if not selection:
        return ""
    return PAIR_SEPARATOR.join(
        f"{variation_id}{VALUE_SEPARATOR}{value}"
        for variation_id, value in sorted(selection.items())
    )


def parse_key(key: str | None) -> dict[str, str]:
    """Inverse of :func:`build_key`.

    Malformed pairs are dropped rather than raised; the caller gets the
    best-effort selection that could be recovered.
    """
    selection: dict[str, str] = {}
    if not key:
        return selection
    for pair in key.split(PAIR_SEPARATOR):
        variation_id, sep, value = pair.partition(VALUE_SEPARATOR)
        if not sep or not variation_id:
            logger.warning("Dropping malformed variation pair %r in key %r", pair, key)
            continue
        selection[variation_id] = value
    return selection


def validate(
    schema: Sequence[VariationOption] | None,
    selection: Mapping[str, str] | None,
) -> bool:
    """Check *selection* against a SKU's variation schema.

    Without a schema only the empty selection is valid.  With a schema,
    every required option must be chosen and every chosen value must be
    allowed; ids the schema does not know are ignored.
    """
    if not schema:
        return not selection
    selection = selection or {}
    for option in schema:
        chosen = selection.get(option.variation_id)
        if chosen is None:
            if option.required:
                return False
            continue
        if chosen not in option.allowed_values:
            return False
    return True


def describe(
    schema: Sequence[VariationOption] | None,
    selection: Mapping[str, str] | None,
) -> str:
    """Human readable form, e.g. ``"Color: red, Size: M"``."""
    if not selection:
        return ""
    names = {option.variation_id: option.name for option in schema or ()}
    return ", ".join(
        f"{names.get(variation_id, variation_id)}: {value}"
        for variation_id, value in sorted(selection.items())
    )
