"""JSON-file-backed session storage for carts, keyed by buyer.

Carts are transient: a missing file, an unknown buyer, or a file or
entry that can no longer be read simply yields an empty cart.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import structlog

from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import Cart, CartLine, PromoApplication
from storefront.domain.model.value_objects import Money, SelectedOptions

logger = structlog.get_logger(__name__)

_UNREADABLE_ENTRY = (
    KeyError,
    TypeError,
    ValueError,
    ArithmeticError,
    AttributeError,
    DomainException,
)


class JsonCartStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def load(self, buyer_id: str) -> Cart:
        raw = self._load_raw().get(buyer_id)
        if raw is None:
            return Cart()
        try:
            return self._to_domain(raw)
        except _UNREADABLE_ENTRY as exc:
            logger.warning("Discarding unreadable cart", buyer_id=buyer_id, error=repr(exc))
            return Cart()

    def save(self, buyer_id: str, cart: Cart) -> None:
        carts = self._load_raw()
        if cart.is_empty and cart.promo is None:
            carts.pop(buyer_id, None)
        else:
            carts[buyer_id] = self._to_raw(cart)
        self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        promo = None
        if cart.promo is not None:
            promo = {
                "code": cart.promo.code,
                "promo_id": cart.promo.promo_id,
                "discount_amount": str(cart.promo.discount_amount.amount),
                "discount_type": cart.promo.discount_type,
                "discount_value": str(cart.promo.discount_value),
            }
        return {
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "category": line.category,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "size": line.options.size,
                    "color": line.options.color,
                }
                for line in cart.lines
            ],
            "promo": promo,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        lines = [
            CartLine(
                product_id=item["product_id"],
                product_name=item["product_name"],
                quantity=item["quantity"],
                unit_price=Money(Decimal(item["unit_price"]), item.get("currency", "USD")),
                options=SelectedOptions(size=item.get("size"), color=item.get("color")),
                category=item.get("category"),
            )
            for item in raw.get("lines", [])
        ]
        promo = None
        if raw.get("promo"):
            p = raw["promo"]
            promo = PromoApplication(
                code=p["code"],
                promo_id=p["promo_id"],
                discount_amount=Money(Decimal(p["discount_amount"])),
                discount_type=p["discount_type"],
                discount_value=Decimal(p["discount_value"]),
            )
        return Cart(lines=lines, promo=promo)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, dict]:
        try:
            carts = json.loads(self._file_path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.warning(
                "Cart file unreadable, starting empty",
                path=str(self._file_path),
                error=str(exc),
            )
            return {}
        if not isinstance(carts, dict):
            logger.warning("Cart file unreadable, starting empty", path=str(self._file_path))
            return {}
        return carts

    def _persist_raw(self, carts: dict[str, dict]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
