"""Unit tests for the Order aggregate."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import (
    AppliedPromo,
    DeliveryStatus,
    Order,
    OrderLineItem,
    generate_tracking_number,
)
from storefront.domain.model.value_objects import Money, Quantity

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _items() -> list[OrderLineItem]:
    return [
        OrderLineItem("1", "Widget", Quantity(2), Money.of("10.00")),
        OrderLineItem("2", "Gadget", Quantity(1), Money.of("5.50")),
    ]


def _place(**kwargs) -> Order:
    defaults = dict(
        buyer_id="alice",
        items=_items(),
        order_date=NOW,
        lead_days=5,
        tracking_number="TRKABC123456",
    )
    defaults.update(kwargs)
    return Order.place(**defaults)


class TestPlace:

    def test_totals_without_promo(self):
        order = _place()
        assert order.subtotal == Money.of("25.50")
        assert order.discount.is_zero
        assert order.total == Money.of("25.50")
        assert order.id is None

    def test_totals_with_promo(self):
        order = _place(promo=AppliedPromo("SAVE10", "p1", Money.of("2.55")))
        assert order.total == Money.of("22.95")
        assert order.discount == Money.of("2.55")

    def test_initial_status_is_processing(self):
        assert _place().delivery_status is DeliveryStatus.PROCESSING

    def test_estimated_delivery(self):
        assert _place(lead_days=7).estimated_delivery_date == NOW + timedelta(days=7)

    def test_buyer_required(self):
        with pytest.raises(ValidationError, match="log in"):
            _place(buyer_id="")

    def test_items_required(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _place(items=[])

    def test_discount_above_subtotal_rejected(self):
        with pytest.raises(ValidationError, match="exceeds order subtotal"):
            _place(promo=AppliedPromo("BIG", "p1", Money.of("100")))


class TestDeliveryStatus:

    def test_advances_through_every_status(self):
        order = _place()
        assert order.advance_delivery() is DeliveryStatus.SHIPPED
        assert order.advance_delivery() is DeliveryStatus.DELIVERING
        assert order.advance_delivery() is DeliveryStatus.DELIVERED

    def test_cannot_advance_past_delivered(self):
        order = _place()
        for _ in range(3):
            order.advance_delivery()
        with pytest.raises(ValidationError, match="already been delivered"):
            order.advance_delivery()


class TestTrackingNumber:

    def test_format(self):
        number = generate_tracking_number()
        assert number.startswith("TRK")
        assert len(number) == 12
        assert number[3:].isalnum()
        assert number[3:] == number[3:].upper()
