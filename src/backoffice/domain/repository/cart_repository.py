"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_for_customer(self, customer_id: str) -> Cart | None:
        """Return the customer's cart, or None if they never had one."""

    @abstractmethod
    def find_by_line_id(self, line_id: int) -> Cart | None:
        """Return whichever cart holds the given line, or None."""

    @abstractmethod
    def next_line_id(self) -> int:
        """Generate the next unique cart line ID."""

    @abstractmethod
    def count_lines_for_sku(self, sku_id: str) -> int:
        """Count cart lines, across all carts, that reference a SKU."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""
