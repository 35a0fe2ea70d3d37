"""Domain service: apply a checkout commit plan.

Runs every step of a CommitPlan through the repositories of an entered
unit of work.  A step that cannot be satisfied raises, and the caller's
unit of work rolls back everything applied before it.  Committing is
left to the caller.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import InsufficientStockError, StockShortage
from storefront.domain.model.commit_plan import (
    CommitPlan,
    CommitStep,
    OrderInsert,
    PromoRedemption,
    StockDecrement,
)
from storefront.domain.model.order import Order
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class PromoRedemptionConflict(Exception):
    """Another order took the last use of the promo code first."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Promo code {code} was exhausted during checkout")


class CommitService:
    """Applies a CommitPlan step by step inside the caller's unit of work.

    Commit and rollback stay with the caller.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def apply(self, plan: CommitPlan) -> Order:
        order: Order | None = None
        for step in plan.steps:
            placed = self._apply_step(step)
            if placed is not None:
                order = placed
        if order is None:
            raise ValueError("Commit plan has no order to insert")
        return order

    def _apply_step(self, step: CommitStep) -> Order | None:
        if isinstance(step, PromoRedemption):
            if not self._uow.promo_codes.redeem(step.promo_id):
                raise PromoRedemptionConflict(step.code)
            return None

        if isinstance(step, StockDecrement):
            result = self._uow.inventory.reserve(step.product_id, step.quantity)
            if not result.ok:
                logger.info(
                    "Stock decrement rejected at commit",
                    product_id=step.product_id,
                    requested=step.quantity,
                    available=result.new_stock,
                )
                raise InsufficientStockError(
                    [
                        StockShortage(
                            step.product_id,
                            step.product_name,
                            step.quantity,
                            result.new_stock,
                        )
                    ]
                )
            return None

        if isinstance(step, OrderInsert):
            self._uow.orders.add(step.order)
            return step.order

        raise TypeError(f"Unknown commit step: {step!r}")
