"""Product aggregate — the inventory-relevant view of a catalog entry.

Products are owned by the catalog (admin-managed, out of scope here).
The checkout engine only needs prices, stock and delivery lead time.
``stock_quantity`` is the single source of truth; ``in_stock`` is derived.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import ReservationResult
from storefront.domain.model.value_objects import Money

DEFAULT_DELIVERY_LEAD_DAYS = 14


@dataclass
class Product:
    """A catalog entry.  ``size_prices`` overrides ``base_price`` per size."""

    id: str
    name: str
    base_price: Money
    stock_quantity: int = 0
    category: str | None = None
    size_prices: dict[str, Money] = field(default_factory=dict)
    delivery_lead_days: int | None = None

    def __post_init__(self) -> None:
        if self.stock_quantity < 0:
            raise ValidationError(
                f"Stock for {self.name} cannot be negative, got {self.stock_quantity}"
            )

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def lead_days(self) -> int:
        return self.delivery_lead_days or DEFAULT_DELIVERY_LEAD_DAYS

    def price_for(self, size: str | None) -> Money:
        """Resolve the unit price for a variant.

        A size with an override uses it; anything else falls back to
        the base price.
        """
        if size and size in self.size_prices:
            return self.size_prices[size]
        return self.base_price

    # --- Stock mutations (in-memory ledger) -----------------------------------

    def reserve(self, quantity: int) -> ReservationResult:
        """Take ``quantity`` units if available.

        Shortage is a normal outcome and is reported, not raised.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.stock_quantity:
            return ReservationResult.rejected(self.stock_quantity)
        self.stock_quantity -= quantity
        return ReservationResult.accepted(self.stock_quantity)

    def release(self, quantity: int) -> ReservationResult:
        """Return ``quantity`` units to stock."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.stock_quantity += quantity
        return ReservationResult.accepted(self.stock_quantity)
