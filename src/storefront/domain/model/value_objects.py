"""Value Objects for prices, quantities and product variants.

All of them are frozen and compare by value.  Construction validates,
so a Money or Quantity in hand is always a legal one.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from storefront.domain.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal(100)


@total_ordering
@dataclass(frozen=True)
class Money:
    """Non-negative amount in one currency.

    Amounts stay exact Decimals through every calculation; rounding to
    cents happens only when ``rounded()`` is asked for, so a discount is
    rounded once and not at each intermediate step.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount.is_signed() and self.amount != 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Build USD money from user or file input."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    # --- Arithmetic -----------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same(other).amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        difference = self.amount - self._same(other).amount
        if difference < 0:
            raise ValidationError(
                f"Subtracting {other} from {self} would give a negative amount"
            )
        return Money(difference, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {units!r}")
        return Money(self.amount * units, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same(other).amount

    def percent(self, rate: Decimal) -> Money:
        """``rate`` percent of this amount, not yet rounded."""
        return Money(self.amount * rate / HUNDRED, self.currency)

    def rounded(self) -> Money:
        """Round to whole cents, halves away from zero."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    @property
    def is_zero(self) -> bool:
        return not self.amount

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def _same(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return other


@dataclass(frozen=True)
class Quantity:
    """How many units of one product a line asks for; at least one."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass, but True units is a caller bug.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SelectedOptions:
    """The variant a buyer picked for a cart line. Both parts are optional."""

    size: str | None = None
    color: str | None = None

    def __str__(self) -> str:
        return "/".join(part for part in (self.size, self.color) if part)
