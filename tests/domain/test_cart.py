"""Unit tests for the Cart value."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.cart import Cart, PromoApplication
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, SelectedOptions

M_RED = SelectedOptions("M", "red")
L_RED = SelectedOptions("L", "red")


def _tee(stock: int = 5) -> Product:
    return Product(
        id="tee",
        name="T-Shirt",
        base_price=Money.of("20.00"),
        stock_quantity=stock,
        category="apparel",
        size_prices={"L": Money.of("22.00")},
    )


class TestAddLine:

    def test_new_line_snapshots_variant_price(self):
        cart = Cart()
        line = cart.add_line(_tee(), 1, L_RED)
        assert line.unit_price == Money.of("22.00")
        assert line.category == "apparel"
        assert cart.subtotal == Money.of("22.00")

    def test_same_variant_merges(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 2, M_RED)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_different_variant_is_a_new_line(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 1, L_RED)
        assert len(cart.lines) == 2
        assert cart.quantities_by_product() == {"tee": 2}

    def test_merge_keeps_original_price_snapshot(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        repriced = _tee()
        repriced.base_price = Money.of("99.00")
        cart.add_line(repriced, 1, M_RED)
        assert cart.lines[0].unit_price == Money.of("20.00")

    def test_resulting_quantity_above_stock_rejected(self):
        cart = Cart()
        cart.add_line(_tee(5), 3, M_RED)
        with pytest.raises(InsufficientStockError, match="Only 5 of T-Shirt available"):
            cart.add_line(_tee(5), 3, M_RED)
        assert cart.lines[0].quantity == 3

    def test_out_of_stock_rejected(self):
        with pytest.raises(InsufficientStockError, match="out of stock"):
            Cart().add_line(_tee(0), 1)

    def test_malformed_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Cart().add_line(_tee(), 0)


class TestUpdateAndRemove:

    def test_update_checks_live_stock(self):
        cart = Cart()
        cart.add_line(_tee(5), 1, M_RED)
        with pytest.raises(InsufficientStockError):
            cart.update_line(_tee(2), M_RED, 3)
        cart.update_line(_tee(5), M_RED, 4)
        assert cart.lines[0].quantity == 4

    def test_update_unknown_line(self):
        with pytest.raises(EntityNotFoundError, match="not found in cart"):
            Cart().update_line(_tee(), M_RED, 1)

    def test_remove_single_variant(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 1, L_RED)
        assert cart.remove_line("tee", size="L", color="red") == 1
        assert [line.options for line in cart.lines] == [M_RED]

    def test_remove_by_size_alone_drops_every_color_of_that_size(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 1, SelectedOptions("M", "blue"))
        cart.add_line(_tee(), 1, L_RED)
        assert cart.remove_line("tee", size="M") == 2
        assert [line.options for line in cart.lines] == [L_RED]

    def test_remove_by_color_alone(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 1, SelectedOptions("M", "blue"))
        assert cart.remove_line("tee", color="blue") == 1
        assert [line.options for line in cart.lines] == [M_RED]

    def test_remove_with_unmatched_option_removes_nothing(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        assert cart.remove_line("tee", size="XL") == 0
        assert len(cart.lines) == 1

    def test_remove_without_options_drops_every_variant(self):
        cart = Cart()
        cart.add_line(_tee(), 1, M_RED)
        cart.add_line(_tee(), 1, L_RED)
        assert cart.remove_line("tee") == 2
        assert cart.is_empty


class TestPromoAndClear:

    def test_clear_drops_lines_and_promo(self):
        cart = Cart()
        cart.add_line(_tee(), 1)
        cart.apply_promo(
            PromoApplication("SAVE10", "p1", Money.of("2.00"), "percentage", Decimal("10"))
        )
        cart.clear()
        assert cart.is_empty
        assert cart.promo is None

    def test_remove_promo(self):
        cart = Cart()
        cart.apply_promo(
            PromoApplication("SAVE10", "p1", Money.of("2.00"), "percentage", Decimal("10"))
        )
        cart.remove_promo()
        assert cart.promo is None
