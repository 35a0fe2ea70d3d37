"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Checkout failures additionally share ``CheckoutError`` so callers can tell
"the checkout did not happen" apart from lookup errors.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CheckoutError(DomainException):
    """A checkout attempt was aborted; nothing was committed."""


class ValidationError(CheckoutError):
    """A business rule or invariant was violated by the caller's input."""


@dataclass(frozen=True)
class StockShortage:
    product_id: str
    product_name: str
    requested: int
    available: int

    def __str__(self) -> str:
        if self.available <= 0:
            return f"{self.product_name} is out of stock"
        return (
            f"Only {self.available} of {self.product_name} available "
            f"(requested {self.requested})"
        )


class InsufficientStockError(CheckoutError):
    """One or more products cannot cover the requested quantity."""

    def __init__(self, shortages: list[StockShortage]) -> None:
        self.shortages = list(shortages)
        super().__init__("; ".join(str(s) for s in self.shortages))


class PromoCodeError(CheckoutError):
    """A promo code cannot be applied to the cart."""


class TransientCheckoutError(CheckoutError):
    """The commit could not complete; no partial effect survived, retry is safe."""


class IntegrityViolationError(CheckoutError):
    """The cart references products that no longer exist."""

    def __init__(self, product_ids: list[str], product_names: list[str]) -> None:
        self.product_ids = list(product_ids)
        self.product_names = list(product_names)
        names = ", ".join(self.product_names)
        super().__init__(
            f"No longer available: {names}. Remove from your cart and review it again."
        )
