"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer (or any other caller) can catch them uniformly and decide
how to present them.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """The requested quantity exceeds what the ledger can supply."""

    def __init__(
        self,
        sku_name: str,
        requested: int,
        available: int,
        variation_key: str = "",
    ) -> None:
        self.sku_name = sku_name
        self.requested = requested
        self.available = available
        self.variation_key = variation_key
        target = f"{sku_name} [{variation_key}]" if variation_key else sku_name
        super().__init__(
            f"Insufficient stock for {target} "
            f"(requested {requested}, available {available})"
        )


class InvalidVariationSelectionError(ValidationError):
    """A variation selection is missing, incomplete or uses unknown values."""


class EmptyCartError(DomainException):
    """Checkout was attempted on a cart without lines."""


class DuplicateRequestError(DomainException):
    """A pending parts request already exists for the booking and SKU."""


class InvalidStateTransitionError(DomainException):
    """The aggregate is not in a state that allows the operation."""


class NotAuthorizedError(DomainException):
    """The caller may not act on this aggregate."""


class ConcurrencyConflictError(DomainException):
    """Stored state changed underneath the caller; retry the whole operation."""
