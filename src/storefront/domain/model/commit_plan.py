"""Commit plan — the single logical write of a checkout.

Everything a checkout changes is described up front as a list of steps,
applied in order inside one unit of work.  Either every step lands or
none does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from storefront.domain.model.order import Order


@dataclass(frozen=True)
class PromoRedemption:
    promo_id: str
    code: str


@dataclass(frozen=True)
class StockDecrement:
    product_id: str
    product_name: str
    quantity: int


@dataclass(frozen=True)
class OrderInsert:
    order: Order


CommitStep = Union[PromoRedemption, StockDecrement, OrderInsert]


@dataclass
class CommitPlan:
    """The ordered writes that turn a validated cart into a placed order."""

    steps: list[CommitStep] = field(default_factory=list)

    @staticmethod
    def for_checkout(
        order: Order,
        decrements: list[StockDecrement],
    ) -> CommitPlan:
        """Redemption first, then stock, then the order row."""
        steps: list[CommitStep] = []
        if order.promo is not None:
            steps.append(PromoRedemption(order.promo.promo_id, order.promo.code))
        steps.extend(decrements)
        steps.append(OrderInsert(order))
        return CommitPlan(steps)

    @property
    def decrements(self) -> list[StockDecrement]:
        return [s for s in self.steps if isinstance(s, StockDecrement)]

    @property
    def redemption(self) -> PromoRedemption | None:
        for step in self.steps:
            if isinstance(step, PromoRedemption):
                return step
        return None
