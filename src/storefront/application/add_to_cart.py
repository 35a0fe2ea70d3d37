"""Application service: Add To Cart use case.

Looks the product up in the catalog and lets the Cart enforce the
merge and stock rules.  The cart is passed in and mutated in place;
persisting it is the caller's business.
"""

from __future__ import annotations

from collections.abc import Callable

from storefront.application.dto import CartLineDTO, cart_lines_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import SelectedOptions
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddToCartHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        cart: Cart,
        product_id: str,
        quantity: int,
        size: str | None = None,
        color: str | None = None,
    ) -> list[CartLineDTO]:
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")

        cart.add_line(product, quantity, SelectedOptions(size=size, color=color))
        return cart_lines_to_dto(cart)
