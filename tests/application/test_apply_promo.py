"""Integration tests for the ApplyPromo use case."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.application.apply_promo import ApplyPromoHandler
from storefront.domain.exceptions import PromoCodeError, ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.product import Product
from storefront.domain.model.promo_code import DiscountType, PromoCode
from storefront.domain.model.value_objects import Money
from tests.fakes import InMemoryStore, uow_factory

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

TEE = Product(id="tee", name="T-Shirt", base_price=Money.of("20.00"),
              stock_quantity=10, category="apparel")
MUG = Product(id="mug", name="Mug", base_price=Money.of("8.00"),
              stock_quantity=10, category="kitchen")


def _promo(code: str = "SAVE10", **kwargs) -> PromoCode:
    return PromoCode.create(
        id=kwargs.pop("id", code.lower()),
        code=code,
        discount_type=kwargs.pop("discount_type", DiscountType.PERCENTAGE),
        discount_value=Decimal(kwargs.pop("discount_value", "10")),
        expiry_date=kwargs.pop("expiry_date", NOW + timedelta(days=7)),
        **kwargs,
    )


def _setup(*promos: PromoCode) -> tuple[ApplyPromoHandler, InMemoryStore]:
    store = InMemoryStore(products=[TEE, MUG], promo_codes=list(promos))
    return ApplyPromoHandler(uow_factory(store), clock=lambda: NOW), store


def _cart(tees: int = 1, mugs: int = 0) -> Cart:
    cart = Cart()
    if tees:
        cart.add_line(TEE, tees)
    if mugs:
        cart.add_line(MUG, mugs)
    return cart


class TestApplyPromoHappyPath:

    def test_attaches_code_and_reports_totals(self):
        handler, _ = _setup(_promo())
        cart = _cart(tees=2)

        dto = handler.handle("save10", cart)

        assert dto.code == "SAVE10"
        assert dto.subtotal == "$40.00"
        assert dto.discount == "$4.00"
        assert dto.new_total == "$36.00"
        assert cart.promo is not None
        assert cart.promo.promo_id == "save10"
        assert cart.promo.discount_amount == Money.of("4.00")

    def test_code_lookup_ignores_case_and_whitespace(self):
        handler, _ = _setup(_promo())
        assert handler.handle("  Save10 ", _cart()).code == "SAVE10"

    def test_does_not_redeem(self):
        handler, store = _setup(_promo(usage_limit=1))
        handler.handle("SAVE10", _cart())
        assert store.promo("save10").used_count == 0
        assert store.commits == 0

    def test_replaces_previous_code(self):
        handler, _ = _setup(_promo(), _promo("FIVER", discount_type=DiscountType.FIXED, discount_value="5"))
        cart = _cart()
        handler.handle("SAVE10", cart)
        handler.handle("FIVER", cart)
        assert cart.promo.code == "FIVER"
        assert cart.promo.discount_amount == Money.of("5.00")

    def test_maximum_discount_caps(self):
        handler, _ = _setup(_promo(discount_value="50", maximum_discount_amount=Money.of("15")))
        dto = handler.handle("SAVE10", _cart(tees=4))
        assert dto.discount == "$15.00"

    def test_category_scope_discounts_only_qualifying_lines(self):
        handler, _ = _setup(_promo(applicable_categories=frozenset({"kitchen"})))
        dto = handler.handle("SAVE10", _cart(tees=1, mugs=1))
        assert dto.discount == "$0.80"
        assert dto.new_total == "$27.20"


class TestApplyPromoRejections:

    @pytest.mark.parametrize("code", ["", "   "])
    def test_blank_code(self, code):
        handler, _ = _setup(_promo())
        with pytest.raises(ValidationError, match="enter a promo code"):
            handler.handle(code, _cart())

    def test_empty_cart(self):
        handler, _ = _setup(_promo())
        with pytest.raises(ValidationError, match="cart is empty"):
            handler.handle("SAVE10", Cart())

    def test_unknown_code(self):
        handler, _ = _setup()
        with pytest.raises(PromoCodeError, match="Invalid promo code"):
            handler.handle("NOPE", _cart())

    def test_inactive_code(self):
        handler, _ = _setup(_promo(is_active=False))
        with pytest.raises(PromoCodeError, match="not active"):
            handler.handle("SAVE10", _cart())

    def test_expired_code(self):
        handler, _ = _setup(_promo(expiry_date=NOW - timedelta(minutes=1)))
        with pytest.raises(PromoCodeError, match="expired"):
            handler.handle("SAVE10", _cart())

    def test_code_valid_through_its_expiry_instant(self):
        handler, _ = _setup(_promo(expiry_date=NOW))
        assert handler.handle("SAVE10", _cart()).discount == "$2.00"

    def test_exhausted_code(self):
        handler, _ = _setup(_promo(usage_limit=3, used_count=3))
        with pytest.raises(PromoCodeError, match="usage limit exceeded"):
            handler.handle("SAVE10", _cart())

    def test_below_minimum(self):
        handler, _ = _setup(_promo(minimum_order_amount=Money.of("50")))
        with pytest.raises(PromoCodeError, match=r"Minimum order amount of \$50.00 required"):
            handler.handle("SAVE10", _cart())

    def test_no_eligible_items(self):
        handler, _ = _setup(_promo(excluded_categories=frozenset({"apparel"})))
        with pytest.raises(PromoCodeError, match="No items in your cart are eligible"):
            handler.handle("SAVE10", _cart())

    def test_rejection_leaves_existing_promo(self):
        handler, _ = _setup(_promo(), _promo("OLDIE", expiry_date=NOW - timedelta(days=1)))
        cart = _cart()
        handler.handle("SAVE10", cart)
        with pytest.raises(PromoCodeError):
            handler.handle("OLDIE", cart)
        assert cart.promo.code == "SAVE10"
