"""Application service: View Cart use case (query).

Shows the cart with a live promo preview: the attached code is
re-validated and its discount recomputed from the current subtotal,
never read from the value cached when it was applied.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from storefront.application.clock import utc_now
from storefront.application.dto import CartDTO, cart_lines_to_dto
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.promo_code_evaluator import PromoCodeEvaluator


class ViewCartHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self, cart: Cart) -> CartDTO:
        subtotal = cart.subtotal
        discount = Money.zero(subtotal.currency)
        message = None

        if cart.promo is not None:
            with self._uow_factory() as uow:
                evaluator = PromoCodeEvaluator(uow.promo_codes)
                validation = evaluator.revalidate(cart.promo.promo_id, self._clock())
                if validation.valid and validation.promo is not None:
                    result = evaluator.compute_discount(
                        validation.promo, subtotal, cart.lines
                    )
                    discount = result.discount
                    message = result.reason
                else:
                    message = validation.reason

        return CartDTO(
            lines=cart_lines_to_dto(cart),
            item_count=cart.item_count,
            subtotal=str(subtotal),
            promo_code=cart.promo.code if cart.promo else None,
            discount=str(discount),
            total=str(subtotal - discount),
            promo_message=message,
        )
