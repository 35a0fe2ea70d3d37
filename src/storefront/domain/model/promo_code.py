"""PromoCode aggregate — eligibility rules and discount computation.

Codes are admin-managed; the checkout engine reads them and, on a
committed order, counts one redemption.

Use ``PromoCode.create()`` for new codes — it enforces the invariants.
The ``__init__`` stays simple so repositories can reconstitute stored
codes without re-validating them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Protocol

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 20


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DiscountableLine(Protocol):
    """What the evaluator needs to know about a cart line."""

    @property
    def line_total(self) -> Money: ...

    @property
    def category(self) -> str | None: ...


@dataclass(frozen=True)
class PromoValidation:
    valid: bool
    reason: str | None = None
    promo: PromoCode | None = None


@dataclass(frozen=True)
class DiscountResult:
    discount: Money
    reason: str | None = None

    @property
    def applies(self) -> bool:
        return not self.discount.is_zero


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class PromoCode:
    """A discount code and the rules that decide whether it applies to a cart."""

    id: str
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    expiry_date: datetime
    description: str = ""
    minimum_order_amount: Money = field(default_factory=Money.zero)
    maximum_discount_amount: Money | None = None
    usage_limit: int | None = None
    used_count: int = 0
    is_active: bool = True
    applicable_categories: frozenset[str] = frozenset()
    excluded_categories: frozenset[str] = frozenset()

    # --- Factory (used for NEW codes only) ------------------------------------

    @staticmethod
    def create(
        id: str,
        code: str,
        discount_type: DiscountType,
        discount_value: Decimal,
        expiry_date: datetime,
        **kwargs,
    ) -> PromoCode:
        code = normalize_code(code)
        if not MIN_CODE_LENGTH <= len(code) <= MAX_CODE_LENGTH:
            raise ValidationError(
                f"Promo code must be {MIN_CODE_LENGTH}-{MAX_CODE_LENGTH} characters"
            )
        if discount_value < 0:
            raise ValidationError("Discount value cannot be negative")
        if discount_type is DiscountType.PERCENTAGE and discount_value > 100:
            raise ValidationError("Percentage discount cannot exceed 100%")

        promo = PromoCode(
            id=id,
            code=code,
            discount_type=discount_type,
            discount_value=discount_value,
            expiry_date=expiry_date,
            **kwargs,
        )
        if promo.usage_limit is not None and promo.usage_limit < 1:
            raise ValidationError("Usage limit must be at least 1")
        if promo.usage_limit is not None and promo.used_count > promo.usage_limit:
            raise ValidationError("Used count cannot exceed the usage limit")
        return promo

    # --- Rules ----------------------------------------------------------------

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    @property
    def is_category_scoped(self) -> bool:
        return bool(self.applicable_categories or self.excluded_categories)

    def validate(self, now: datetime) -> PromoValidation:
        """Check whether the code may be used at ``now``."""
        if not self.is_active:
            return PromoValidation(False, "Promo code is not active", self)
        if now > self.expiry_date:
            return PromoValidation(False, "Promo code has expired", self)
        if self.is_exhausted:
            return PromoValidation(False, "Promo code usage limit exceeded", self)
        return PromoValidation(True, None, self)

    def qualifies(self, category: str | None) -> bool:
        if category is not None and category in self.excluded_categories:
            return False
        if self.applicable_categories:
            return category in self.applicable_categories
        return True

    def compute_discount(
        self,
        subtotal: Money,
        lines: Iterable[DiscountableLine],
    ) -> DiscountResult:
        """Compute the discount for a cart.

        The minimum order amount applies to the whole subtotal.  A
        category-scoped code only discounts its qualifying lines, and a
        cart with no qualifying lines gets nothing.  The result never
        exceeds the cap nor the discounted base, and is rounded to cents.
        """
        if subtotal < self.minimum_order_amount:
            return DiscountResult(
                Money.zero(subtotal.currency),
                f"Minimum order amount of {self.minimum_order_amount} required",
            )

        base = subtotal
        if self.is_category_scoped:
            base = Money.zero(subtotal.currency)
            for line in lines:
                if self.qualifies(line.category):
                    base = base + line.line_total
            if base.is_zero:
                return DiscountResult(
                    Money.zero(subtotal.currency),
                    "No items in your cart are eligible for this promo code",
                )

        if self.discount_type is DiscountType.PERCENTAGE:
            discount = base.percent(self.discount_value)
        else:
            discount = Money(self.discount_value, subtotal.currency)

        if self.maximum_discount_amount is not None and discount > self.maximum_discount_amount:
            discount = self.maximum_discount_amount
        if discount > base:
            discount = base

        return DiscountResult(discount.rounded())
