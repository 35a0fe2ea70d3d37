"""Order aggregate — the durable record of a committed checkout.

An order is created exactly once per successful checkout and is never
deleted.  Its lines and amounts are snapshots; only the delivery status
moves afterwards, driven by the fulfillment process.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, SelectedOptions

TRACKING_PREFIX = "TRK"
TRACKING_LENGTH = 9
_TRACKING_ALPHABET = string.ascii_uppercase + string.digits


class DeliveryStatus(Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERING = "Delivering"
    DELIVERED = "Delivered"


_NEXT_STATUS = {
    DeliveryStatus.PROCESSING: DeliveryStatus.SHIPPED,
    DeliveryStatus.SHIPPED: DeliveryStatus.DELIVERING,
    DeliveryStatus.DELIVERING: DeliveryStatus.DELIVERED,
}


def generate_tracking_number() -> str:
    suffix = "".join(secrets.choice(_TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))
    return TRACKING_PREFIX + suffix


@dataclass(frozen=True)
class OrderLineItem:
    """Product name and price captured when the order was placed."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money
    options: SelectedOptions = field(default_factory=SelectedOptions)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class AppliedPromo:
    code: str
    promo_id: str
    discount_amount: Money


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders — it enforces all business
    rules.  The ``__init__`` is intentionally simple so the repository
    can reconstitute persisted orders without re-validating.
    """

    id: int | None
    buyer_id: str
    items: list[OrderLineItem]
    subtotal: Money
    discount: Money
    total: Money
    estimated_delivery_date: datetime
    tracking_number: str
    promo: AppliedPromo | None = None
    delivery_status: DeliveryStatus = DeliveryStatus.PROCESSING
    order_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        buyer_id: str,
        items: list[OrderLineItem],
        order_date: datetime,
        lead_days: int,
        tracking_number: str,
        promo: AppliedPromo | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not buyer_id:
            raise ValidationError("Please log in to place an order")
        if not items:
            raise ValidationError("Order must contain at least one item")
        if lead_days < 0:
            raise ValidationError("Delivery lead time cannot be negative")

        subtotal = Money.zero()
        for item in items:
            subtotal = subtotal + item.line_total

        discount = promo.discount_amount if promo else Money.zero(subtotal.currency)
        if discount > subtotal:
            raise ValidationError(
                f"Discount {discount} exceeds order subtotal {subtotal}"
            )

        return Order(
            id=None,
            buyer_id=buyer_id,
            items=list(items),
            subtotal=subtotal,
            discount=discount,
            total=subtotal - discount,
            estimated_delivery_date=order_date + timedelta(days=lead_days),
            tracking_number=tracking_number,
            promo=promo,
            order_date=order_date,
        )

    # --- State transitions ----------------------------------------------------

    def advance_delivery(self) -> DeliveryStatus:
        """Move to the next delivery status.

        Called by the fulfillment process, never by checkout.
        """
        next_status = _NEXT_STATUS.get(self.delivery_status)
        if next_status is None:
            raise ValidationError("Order has already been delivered")
        self.delivery_status = next_status
        return next_status
