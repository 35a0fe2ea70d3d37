"""Unit tests for the Product aggregate's stock and pricing rules."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import DEFAULT_DELIVERY_LEAD_DAYS, Product
from storefront.domain.model.value_objects import Money


def _product(stock: int = 10, **kwargs) -> Product:
    return Product(id="1", name="Widget", base_price=Money.of("15.00"), stock_quantity=stock, **kwargs)


class TestProductReserve:

    def test_reserve_reduces_stock(self):
        p = _product(10)
        result = p.reserve(3)
        assert result.ok
        assert result.new_stock == 7
        assert p.stock_quantity == 7

    def test_reserve_everything_marks_out_of_stock(self):
        p = _product(2)
        result = p.reserve(2)
        assert result.ok
        assert not result.in_stock
        assert not p.in_stock

    def test_shortage_is_reported_not_raised(self):
        p = _product(2)
        result = p.reserve(3)
        assert not result.ok
        assert result.new_stock == 2
        assert p.stock_quantity == 2

    def test_reserve_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _product().reserve(0)


class TestProductRelease:

    def test_release_restores_stock(self):
        p = _product(0)
        assert not p.in_stock
        result = p.release(4)
        assert result.new_stock == 4
        assert p.in_stock

    def test_release_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _product().release(-1)


class TestProductPricing:

    def test_size_override(self):
        p = _product(size_prices={"XL": Money.of("18.00")})
        assert p.price_for("XL") == Money.of("18.00")

    def test_unknown_size_falls_back_to_base_price(self):
        p = _product(size_prices={"XL": Money.of("18.00")})
        assert p.price_for("S") == Money.of("15.00")
        assert p.price_for(None) == Money.of("15.00")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _product(-1)

    def test_default_lead_days(self):
        assert _product().lead_days == DEFAULT_DELIVERY_LEAD_DAYS
        assert _product(delivery_lead_days=3).lead_days == 3
