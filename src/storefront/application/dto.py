"""Data Transfer Objects returned by the handlers.

Amounts are pre-formatted strings and dates are rendered in UTC, so the
CLI only lays them out and never touches Money or Order directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    product_name: str
    variant: str  # e.g. "M/red", empty when no options were picked
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    lines: list[CartLineDTO]
    item_count: int
    subtotal: str
    promo_code: str | None
    discount: str
    total: str
    promo_message: str | None = None


@dataclass(frozen=True)
class PromoApplicationDTO:
    code: str
    discount: str
    subtotal: str
    new_total: str


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_name: str
    variant: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    buyer_id: str
    status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    promo_code: str | None
    discount: str
    total: str
    tracking_number: str
    estimated_delivery: str
    order_date: str


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    page: int
    total_pages: int
    total_orders: int


# --- Mapping ------------------------------------------------------------------


def cart_lines_to_dto(cart: Cart) -> list[CartLineDTO]:
    return [
        CartLineDTO(
            product_id=line.product_id,
            product_name=line.product_name,
            variant=str(line.options),
            quantity=line.quantity,
            unit_price=str(line.unit_price),
            line_total=str(line.line_total),
        )
        for line in cart.lines
    ]


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        buyer_id=order.buyer_id,
        status=order.delivery_status.value,
        items=[
            OrderLineItemDTO(
                product_name=item.product_name,
                variant=str(item.options),
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        promo_code=order.promo.code if order.promo else None,
        discount=str(order.discount),
        total=str(order.total),
        tracking_number=order.tracking_number,
        estimated_delivery=order.estimated_delivery_date.strftime("%Y-%m-%d"),
        order_date=order.order_date.strftime("%Y-%m-%d %H:%M UTC"),
    )
