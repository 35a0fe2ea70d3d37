"""Application service: Remove Promo Code use case."""

from __future__ import annotations

from storefront.domain.model.cart import Cart


class RemovePromoHandler:

    def handle(self, cart: Cart) -> None:
        cart.remove_promo()
