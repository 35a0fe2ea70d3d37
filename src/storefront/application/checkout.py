"""Application service: Checkout use case.

Turns a cart into an order.  One attempt runs these passes:

1. Preflight      — buyer and cart sanity, before touching any store.
2. Verification   — every product still exists and covers the quantity
                    asked for across all of its variant lines.
3. Pricing        — subtotal from the cart's price snapshots.
4. Promo          — the attached code is re-validated and its discount
                    recomputed; an unusable code just yields no discount.
5. Commit         — promo redemption, stock decrements and the order
                    row are applied as one CommitPlan.
6. Postcommit     — the cart is emptied.

Passes 2 to 5 share a single unit of work, so stock checked in pass 2
is re-checked by the conditional decrements of pass 5 inside the same
transaction, and any failure leaves stock, promo usage and orders
untouched.  The cart is only modified once the commit has succeeded.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from storefront.application.clock import utc_now
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import (
    CheckoutError,
    InsufficientStockError,
    IntegrityViolationError,
    StockShortage,
    TransientCheckoutError,
    ValidationError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.commit_plan import CommitPlan, StockDecrement
from storefront.domain.model.order import (
    AppliedPromo,
    Order,
    OrderLineItem,
    generate_tracking_number,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.commit_service import (
    CommitService,
    PromoRedemptionConflict,
)
from storefront.domain.service.promo_code_evaluator import PromoCodeEvaluator

logger = structlog.get_logger(__name__)

# A redemption race is retried once; the second attempt sees the code
# as exhausted and checks out without it.
MAX_ATTEMPTS = 2


class CheckoutHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Callable[[], datetime] = utc_now,
        tracking_numbers: Callable[[], str] = generate_tracking_number,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._tracking_numbers = tracking_numbers

    def handle(self, buyer_id: str | None, cart: Cart) -> OrderDTO:
        log = logger.bind(buyer_id=buyer_id)
        try:
            self._preflight(buyer_id, cart)
            for attempt in range(1, MAX_ATTEMPTS + 1):
                try:
                    order = self._attempt(buyer_id, cart)  # type: ignore[arg-type]
                    break
                except PromoRedemptionConflict as exc:
                    log.info("Promo code exhausted during commit", code=exc.code, attempt=attempt)
            else:
                raise TransientCheckoutError(
                    "The promo code changed while placing your order, please try again"
                )
        except CheckoutError as exc:
            log.info("Checkout aborted", reason=type(exc).__name__, detail=str(exc))
            raise

        # Postcommit: only reached once the unit of work has committed.
        cart.clear()
        log.info(
            "Checkout committed",
            order_id=order.id,
            total=str(order.total),
            tracking_number=order.tracking_number,
        )
        return order_to_dto(order)

    # --- Passes ---------------------------------------------------------------

    @staticmethod
    def _preflight(buyer_id: str | None, cart: Cart) -> None:
        if cart.is_empty:
            raise ValidationError("Your cart is empty")
        if not buyer_id:
            raise ValidationError("Please log in to place an order")
        for line in cart.lines:
            Quantity(line.quantity)

    def _attempt(self, buyer_id: str, cart: Cart) -> Order:
        now = self._clock()
        with self._uow_factory() as uow:
            products = self._verify_stock(uow, cart)
            subtotal = cart.subtotal
            promo = self._price_promo(uow, cart, subtotal, now)

            order = Order.place(
                buyer_id=buyer_id,
                items=[
                    OrderLineItem(
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=Quantity(line.quantity),
                        unit_price=line.unit_price,
                        options=line.options,
                    )
                    for line in cart.lines
                ],
                order_date=now,
                lead_days=max(p.lead_days for p in products.values()),
                tracking_number=self._tracking_numbers(),
                promo=promo,
            )
            decrements = [
                StockDecrement(product_id, products[product_id].name, quantity)
                for product_id, quantity in cart.quantities_by_product().items()
            ]
            placed = CommitService(uow).apply(CommitPlan.for_checkout(order, decrements))
            uow.commit()
        return placed

    @staticmethod
    def _verify_stock(uow: UnitOfWork, cart: Cart) -> dict[str, Product]:
        products: dict[str, Product] = {}
        missing_ids: list[str] = []
        missing_names: list[str] = []
        shortages: list[StockShortage] = []

        names = {line.product_id: line.product_name for line in cart.lines}
        for product_id, requested in cart.quantities_by_product().items():
            product = uow.products.get_by_id(product_id)
            if product is None:
                missing_ids.append(product_id)
                missing_names.append(names[product_id])
                continue
            products[product_id] = product
            if requested > product.stock_quantity:
                shortages.append(
                    StockShortage(product_id, product.name, requested, product.stock_quantity)
                )

        if missing_ids:
            raise IntegrityViolationError(missing_ids, missing_names)
        if shortages:
            raise InsufficientStockError(shortages)
        return products

    @staticmethod
    def _price_promo(
        uow: UnitOfWork,
        cart: Cart,
        subtotal: Money,
        now: datetime,
    ) -> AppliedPromo | None:
        if cart.promo is None:
            return None

        evaluator = PromoCodeEvaluator(uow.promo_codes)
        validation = evaluator.revalidate(cart.promo.promo_id, now)
        if not validation.valid or validation.promo is None:
            logger.info("Promo code dropped at checkout", code=cart.promo.code, reason=validation.reason)
            return None

        result = evaluator.compute_discount(validation.promo, subtotal, cart.lines)
        if not result.applies:
            logger.info("Promo code dropped at checkout", code=cart.promo.code, reason=result.reason)
            return None

        return AppliedPromo(
            code=validation.promo.code,
            promo_id=validation.promo.id,
            discount_amount=result.discount,
        )
