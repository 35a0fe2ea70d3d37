"""Load catalog products and promo codes from a JSON seed file.

Expected shape::

    {
      "products": [
        {"id": "tee", "name": "T-Shirt", "base_price": "20.00",
         "stock_quantity": 10, "category": "apparel",
         "size_prices": {"XL": "22.00"}, "delivery_lead_days": 5}
      ],
      "promo_codes": [
        {"id": "p1", "code": "SAVE10", "discount_type": "percentage",
         "discount_value": "10", "expiry_date": "2030-01-01T00:00:00+00:00",
         "minimum_order_amount": "0", "maximum_discount_amount": null,
         "usage_limit": 100, "applicable_categories": [], "excluded_categories": []}
      ]
    }

Existing records with the same ID are overwritten.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import TypeVar

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.promo_code import DiscountType, PromoCode
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork

T = TypeVar("T")


def load_seed_file(
    path: Path,
    uow_factory: Callable[[], UnitOfWork],
) -> tuple[int, int]:
    """Store every product and promo code in the file; return both counts.

    Nothing is stored unless every record in the file is valid.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Seed file is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValidationError("Seed file must hold a JSON object")

    products = [_parse(_product, p) for p in raw.get("products", [])]
    promos = [_parse(_promo_code, p) for p in raw.get("promo_codes", [])]

    with uow_factory() as uow:
        for product in products:
            uow.products.save(product)
        for promo in promos:
            uow.promo_codes.save(promo)
        uow.commit()

    return len(products), len(promos)


def _parse(build: Callable[[dict], T], raw: dict) -> T:
    try:
        return build(raw)
    except (KeyError, ValueError, TypeError, ArithmeticError, AttributeError) as exc:
        raise ValidationError(f"Invalid seed record {raw!r}: {exc!r}") from exc


def _product(raw: dict) -> Product:
    return Product(
        id=str(raw["id"]),
        name=raw["name"],
        base_price=Money.of(raw["base_price"]),
        stock_quantity=int(raw.get("stock_quantity", 0)),
        category=raw.get("category"),
        size_prices={size: Money.of(price) for size, price in raw.get("size_prices", {}).items()},
        delivery_lead_days=raw.get("delivery_lead_days"),
    )


def _promo_code(raw: dict) -> PromoCode:
    expiry = datetime.fromisoformat(raw["expiry_date"])
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)

    maximum = raw.get("maximum_discount_amount")
    return PromoCode.create(
        id=str(raw["id"]),
        code=raw["code"],
        discount_type=DiscountType(raw.get("discount_type", "percentage")),
        discount_value=Decimal(str(raw["discount_value"])),
        expiry_date=expiry,
        description=raw.get("description", ""),
        minimum_order_amount=Money.of(raw.get("minimum_order_amount", "0")),
        maximum_discount_amount=Money.of(maximum) if maximum is not None else None,
        usage_limit=raw.get("usage_limit"),
        used_count=int(raw.get("used_count", 0)),
        is_active=bool(raw.get("is_active", True)),
        applicable_categories=frozenset(raw.get("applicable_categories", [])),
        excluded_categories=frozenset(raw.get("excluded_categories", [])),
    )
