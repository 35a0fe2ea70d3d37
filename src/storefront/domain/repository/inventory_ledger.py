"""Abstract inventory ledger — the authoritative stock count per product.

Implementations must make ``reserve`` a single conditional update
against the store: decrement only if enough stock remains, read and
written in one indivisible step.  Reading the stock, computing the new
value in Python and writing it back is a lost-update race and is not
an acceptable implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.inventory import ReservationResult


class InventoryLedger(ABC):

    @abstractmethod
    def reserve(self, product_id: str, quantity: int) -> ReservationResult:
        """Take ``quantity`` units if available.

        Returns a rejected result (not an exception) on shortage.  Raises
        EntityNotFoundError for an unknown product.
        """

    @abstractmethod
    def release(self, product_id: str, quantity: int) -> ReservationResult:
        """Return ``quantity`` units to stock."""

    @abstractmethod
    def stock_of(self, product_id: str) -> int | None:
        """Current stock, or None for an unknown product."""
