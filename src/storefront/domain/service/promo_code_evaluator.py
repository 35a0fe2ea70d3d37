"""Domain service: Promo Code Evaluator.

Looks codes up and applies the PromoCode rules to a cart.  Redemption
itself is not done here: it is a step of the checkout commit plan, so
it can only happen as part of a committed order.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from storefront.domain.model.promo_code import (
    DiscountableLine,
    DiscountResult,
    PromoCode,
    PromoValidation,
    normalize_code,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.promo_code_repository import PromoCodeRepository


class PromoCodeEvaluator:

    def __init__(self, promo_repo: PromoCodeRepository) -> None:
        self._promo_repo = promo_repo

    def validate(self, code: str, now: datetime) -> PromoValidation:
        """Validate a code typed by the buyer."""
        promo = self._promo_repo.get_by_code(normalize_code(code))
        if promo is None:
            return PromoValidation(False, "Invalid promo code")
        return promo.validate(now)

    def revalidate(self, promo_id: str, now: datetime) -> PromoValidation:
        """Validate a code already attached to a cart, by identity."""
        promo = self._promo_repo.get_by_id(promo_id)
        if promo is None:
            return PromoValidation(False, "Promo code no longer exists")
        return promo.validate(now)

    @staticmethod
    def compute_discount(
        promo: PromoCode,
        subtotal: Money,
        lines: Iterable[DiscountableLine],
    ) -> DiscountResult:
        return promo.compute_discount(subtotal, lines)
