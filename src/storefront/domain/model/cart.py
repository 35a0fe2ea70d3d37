"""Cart — the buyer's pending selections.

The cart is a plain value handed to the application handlers; it has no
ambient storage.  Whatever session mechanism the caller uses is
responsible for keeping it between requests.

Lines are unique per (product, selected options).  Each line keeps the
unit price resolved when it was first added: that price governs the
eventual order, even if the catalog price changes in the meantime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    StockShortage,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity, SelectedOptions


@dataclass
class CartLine:
    """One product variant in a cart, priced as it was when added."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: Money  # snapshot at add-to-cart time
    options: SelectedOptions = field(default_factory=SelectedOptions)
    category: str | None = None

    @property
    def key(self) -> tuple[str, SelectedOptions]:
        return (self.product_id, self.options)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PromoApplication:
    """A promo code attached to the cart.

    ``discount_amount`` is what the buyer was shown when the code was
    applied.  It is a display hint only and is recomputed against the
    current subtotal before any use.
    """

    code: str
    promo_id: str
    discount_amount: Money
    discount_type: str
    discount_value: Decimal


@dataclass
class Cart:
    """A buyer's pending lines plus at most one attached promo code.

    Lines are keyed by product and selected options.  Nothing here touches
    stock; quantities are checked against the product handed in.
    """

    lines: list[CartLine] = field(default_factory=list)
    promo: PromoApplication | None = None

    # --- Queries --------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def find_line(self, product_id: str, options: SelectedOptions) -> CartLine | None:
        for line in self.lines:
            if line.key == (product_id, options):
                return line
        return None

    def quantities_by_product(self) -> dict[str, int]:
        """Total requested units per product, across all of its variants."""
        totals: dict[str, int] = {}
        for line in self.lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
        return totals

    # --- Mutations ------------------------------------------------------------

    def add_line(
        self,
        product: Product,
        quantity: int,
        options: SelectedOptions | None = None,
    ) -> CartLine:
        """Add ``quantity`` units of a product variant.

        Merges into an existing line with the same variant.  Rejects the
        change when the resulting line would exceed the known stock.
        """
        qty = Quantity(quantity).value
        options = options or SelectedOptions()

        if not product.in_stock:
            raise InsufficientStockError(
                [StockShortage(product.id, product.name, qty, 0)]
            )

        existing = self.find_line(product.id, options)
        in_cart = existing.quantity if existing else 0
        if in_cart + qty > product.stock_quantity:
            raise InsufficientStockError(
                [
                    StockShortage(
                        product.id,
                        product.name,
                        in_cart + qty,
                        product.stock_quantity,
                    )
                ]
            )

        if existing is not None:
            existing.quantity += qty
            return existing

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            quantity=qty,
            unit_price=product.price_for(options.size),  # <-- price snapshot
            options=options,
            category=product.category,
        )
        self.lines.append(line)
        return line

    def update_line(
        self,
        product: Product,
        options: SelectedOptions,
        quantity: int,
    ) -> CartLine:
        """Set a line's quantity after checking it against live stock."""
        qty = Quantity(quantity).value
        line = self.find_line(product.id, options)
        if line is None:
            raise EntityNotFoundError("Item not found in cart")
        if qty > product.stock_quantity:
            raise InsufficientStockError(
                [StockShortage(product.id, product.name, qty, product.stock_quantity)]
            )
        line.quantity = qty
        return line

    def remove_line(
        self,
        product_id: str,
        size: str | None = None,
        color: str | None = None,
    ) -> int:
        """Remove the product's lines matching the given options.

        An omitted size or color matches any value, so with neither given
        every variant of the product goes.  Returns the number of lines
        removed.
        """
        before = len(self.lines)
        self.lines = [
            line
            for line in self.lines
            if not (
                line.product_id == product_id
                and (size is None or line.options.size == size)
                and (color is None or line.options.color == color)
            )
        ]
        return before - len(self.lines)

    def drop_products(self, product_ids: list[str]) -> None:
        for product_id in product_ids:
            self.remove_line(product_id)

    def apply_promo(self, application: PromoApplication) -> None:
        self.promo = application

    def remove_promo(self) -> None:
        self.promo = None

    def clear(self) -> None:
        self.lines = []
        self.promo = None
