"""Abstract repository for the Sku aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.sku import Sku


class SkuRepository(ABC):

    @abstractmethod
    def get_by_id(self, sku_id: str) -> Sku | None:
        """Return a SKU by its ID (deleted ones included), or None."""

    @abstractmethod
    def get_by_code(self, code: str) -> Sku | None:
        """Return a SKU by its part code (case-insensitive), or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> Sku | None:
        """Return a SKU by its exact name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self, include_deleted: bool = False) -> list[Sku]:
        """Return SKUs, skipping tombstoned ones unless asked."""

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique SKU ID."""

    @abstractmethod
    def save(self, sku: Sku) -> None:
        """Persist a new or updated SKU.

        Implementations compare ``sku.version`` with the stored version,
        raise ConcurrencyConflictError on mismatch and bump the version
        on success.
        """
