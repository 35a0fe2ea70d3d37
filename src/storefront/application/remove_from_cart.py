"""Application service: Remove From Cart use case."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart


class RemoveFromCartHandler:

    def handle(
        self,
        cart: Cart,
        product_id: str,
        size: str | None = None,
        color: str | None = None,
    ) -> int:
        """Remove the lines matching the given options; omitted ones match anything."""
        removed = cart.remove_line(product_id, size=size, color=color)
        if removed == 0:
            raise EntityNotFoundError("Item not found in cart")
        return removed
