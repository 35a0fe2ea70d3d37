"""Application service: Apply Promo Code use case.

Validates a code against the current cart and attaches it.  Nothing is
redeemed here; the code is counted only when an order commits.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from storefront.application.clock import utc_now
from storefront.application.dto import PromoApplicationDTO
from storefront.domain.exceptions import PromoCodeError, ValidationError
from storefront.domain.model.cart import Cart, PromoApplication
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.promo_code_evaluator import PromoCodeEvaluator

logger = structlog.get_logger(__name__)


class ApplyPromoHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self, code: str, cart: Cart) -> PromoApplicationDTO:
        if not code or not code.strip():
            raise ValidationError("Please enter a promo code")
        if cart.is_empty:
            raise ValidationError("Your cart is empty")

        subtotal = cart.subtotal
        with self._uow_factory() as uow:
            evaluator = PromoCodeEvaluator(uow.promo_codes)
            validation = evaluator.validate(code, self._clock())
            if not validation.valid or validation.promo is None:
                raise PromoCodeError(validation.reason or "Invalid promo code")
            promo = validation.promo
            result = evaluator.compute_discount(promo, subtotal, cart.lines)

        if not result.applies:
            raise PromoCodeError(result.reason or "Promo code does not apply to this cart")

        cart.apply_promo(
            PromoApplication(
                code=promo.code,
                promo_id=promo.id,
                discount_amount=result.discount,
                discount_type=promo.discount_type.value,
                discount_value=promo.discount_value,
            )
        )
        logger.info("Promo code applied", code=promo.code, discount=str(result.discount))

        return PromoApplicationDTO(
            code=promo.code,
            discount=str(result.discount),
            subtotal=str(subtotal),
            new_total=str(subtotal - result.discount),
        )
