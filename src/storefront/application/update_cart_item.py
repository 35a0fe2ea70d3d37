"""Application service: Update Cart Item use case.

Re-reads live stock before changing a line's quantity.
"""

from __future__ import annotations

from collections.abc import Callable

from storefront.application.dto import CartLineDTO, cart_lines_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import SelectedOptions
from storefront.domain.repository.unit_of_work import UnitOfWork


class UpdateCartItemHandler:

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
            raise EntityNotFoundError("Product no longer exists")

        cart.update_line(product, SelectedOptions(size=size, color=color), quantity)
        return cart_lines_to_dto(cart)
