"""Abstract repository for PromoCode aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.promo_code import PromoCode


class PromoCodeRepository(ABC):

    @abstractmethod
    def get_by_id(self, promo_id: str) -> PromoCode | None:
        """Return a promo code by its ID, or None."""

    @abstractmethod
    def get_by_code(self, code: str) -> PromoCode | None:
        """Return a promo code by its (case-insensitive) code, or None."""

    @abstractmethod
    def save(self, promo: PromoCode) -> None:
        """Persist a new or updated promo code."""

    @abstractmethod
    def redeem(self, promo_id: str) -> bool:
        """Count one use of the code, atomically.

        Returns False without changing anything if the code is unknown,
        inactive, or has already reached its usage limit.
        """
