"""SQLAlchemy-backed repositories.

All of them work on the session of the enclosing unit of work and never
commit on their own.  Stock and promo-usage mutations are single
conditional UPDATE statements; nothing here reads a counter, changes it
in Python and writes it back.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.inventory import ReservationResult
from storefront.domain.model.order import (
    AppliedPromo,
    DeliveryStatus,
    Order,
    OrderLineItem,
)
from storefront.domain.model.product import Product
from storefront.domain.model.promo_code import DiscountType, PromoCode, normalize_code
from storefront.domain.model.value_objects import Money, Quantity, SelectedOptions
from storefront.domain.repository.inventory_ledger import InventoryLedger
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.promo_code_repository import PromoCodeRepository
from storefront.infrastructure.persistence.tables import (
    OrderLineRow,
    OrderRow,
    ProductRow,
    PromoCodeRow,
)

_products = ProductRow.__table__
_promo_codes = PromoCodeRow.__table__


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# --- Products & inventory -------------------------------------------------------


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, product_id: str) -> Product | None:
        row = self._session.execute(
            select(ProductRow)
            .where(ProductRow.id == product_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return None if row is None else self._to_domain(row)

    def list_all(self) -> list[Product]:
        rows = self._session.execute(
            select(ProductRow)
            .order_by(ProductRow.name)
            .execution_options(populate_existing=True)
        ).scalars()
        return [self._to_domain(row) for row in rows]

    def save(self, product: Product) -> None:
        self._session.merge(self._to_row(product))
        self._session.flush()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(product: Product) -> ProductRow:
        return ProductRow(
            id=product.id,
            name=product.name,
            category=product.category,
            base_price=product.base_price.amount,
            size_prices={size: str(price.amount) for size, price in product.size_prices.items()},
            stock_quantity=product.stock_quantity,
            in_stock=product.in_stock,
            delivery_lead_days=product.delivery_lead_days,
        )

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            category=row.category,
            base_price=Money(row.base_price),
            size_prices={size: Money(Decimal(price)) for size, price in (row.size_prices or {}).items()},
            stock_quantity=row.stock_quantity,
            delivery_lead_days=row.delivery_lead_days,
        )


class SqlAlchemyInventoryLedger(InventoryLedger):

    def __init__(self, session: Session) -> None:
        self._session = session

    def reserve(self, product_id: str, quantity: int) -> ReservationResult:
        new_stock = self._session.execute(
            update(_products)
            .where(_products.c.id == product_id, _products.c.stock_quantity >= quantity)
            .values(
                stock_quantity=_products.c.stock_quantity - quantity,
                in_stock=(_products.c.stock_quantity - quantity) > 0,
            )
            .returning(_products.c.stock_quantity)
        ).scalar_one_or_none()
        if new_stock is not None:
            return ReservationResult.accepted(new_stock)

        available = self.stock_of(product_id)
        if available is None:
            raise EntityNotFoundError(f"No inventory record for product '{product_id}'")
        return ReservationResult.rejected(available)

    def release(self, product_id: str, quantity: int) -> ReservationResult:
        new_stock = self._session.execute(
            update(_products)
            .where(_products.c.id == product_id)
            .values(
                stock_quantity=_products.c.stock_quantity + quantity,
                in_stock=(_products.c.stock_quantity + quantity) > 0,
            )
            .returning(_products.c.stock_quantity)
        ).scalar_one_or_none()
        if new_stock is None:
            raise EntityNotFoundError(f"No inventory record for product '{product_id}'")
        return ReservationResult.accepted(new_stock)

    def stock_of(self, product_id: str) -> int | None:
        return self._session.execute(
            select(_products.c.stock_quantity).where(_products.c.id == product_id)
        ).scalar_one_or_none()


# --- Promo codes ----------------------------------------------------------------


class SqlAlchemyPromoCodeRepository(PromoCodeRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, promo_id: str) -> PromoCode | None:
        return self._first(select(PromoCodeRow).where(PromoCodeRow.id == promo_id))

    def get_by_code(self, code: str) -> PromoCode | None:
        return self._first(
            select(PromoCodeRow).where(PromoCodeRow.code == normalize_code(code))
        )

    def save(self, promo: PromoCode) -> None:
        self._session.merge(self._to_row(promo))
        self._session.flush()

    def redeem(self, promo_id: str) -> bool:
        redeemed = self._session.execute(
            update(_promo_codes)
            .where(
                _promo_codes.c.id == promo_id,
                _promo_codes.c.is_active.is_(True),
                or_(
                    _promo_codes.c.usage_limit.is_(None),
                    _promo_codes.c.used_count < _promo_codes.c.usage_limit,
                ),
            )
            .values(used_count=_promo_codes.c.used_count + 1)
            .returning(_promo_codes.c.id)
        ).scalar_one_or_none()
        return redeemed is not None

    def _first(self, stmt) -> PromoCode | None:
        row = self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return None if row is None else self._to_domain(row)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(promo: PromoCode) -> PromoCodeRow:
        return PromoCodeRow(
            id=promo.id,
            code=promo.code,
            description=promo.description,
            discount_type=promo.discount_type.value,
            discount_value=promo.discount_value,
            minimum_order_amount=promo.minimum_order_amount.amount,
            maximum_discount_amount=(
                promo.maximum_discount_amount.amount
                if promo.maximum_discount_amount is not None
                else None
            ),
            expiry_date=_to_naive_utc(promo.expiry_date),
            usage_limit=promo.usage_limit,
            used_count=promo.used_count,
            is_active=promo.is_active,
            applicable_categories=sorted(promo.applicable_categories),
            excluded_categories=sorted(promo.excluded_categories),
        )

    @staticmethod
    def _to_domain(row: PromoCodeRow) -> PromoCode:
        return PromoCode(
            id=row.id,
            code=row.code,
            description=row.description,
            discount_type=DiscountType(row.discount_type),
            discount_value=row.discount_value,
            minimum_order_amount=Money(row.minimum_order_amount),
            maximum_discount_amount=(
                Money(row.maximum_discount_amount)
                if row.maximum_discount_amount is not None
                else None
            ),
            expiry_date=_as_utc(row.expiry_date),
            usage_limit=row.usage_limit,
            used_count=row.used_count,
            is_active=row.is_active,
            applicable_categories=frozenset(row.applicable_categories or ()),
            excluded_categories=frozenset(row.excluded_categories or ()),
        )


# --- Orders ---------------------------------------------------------------------


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, order: Order) -> None:
        row = self._to_row(order)
        self._session.add(row)
        self._session.flush()
        order.id = row.id

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.execute(
            select(OrderRow)
            .where(OrderRow.id == order_id)
            .options(selectinload(OrderRow.lines))
        ).scalar_one_or_none()
        return None if row is None else self._to_domain(row)

    def list_for_buyer(self, buyer_id: str, offset: int, limit: int) -> list[Order]:
        rows = self._session.execute(
            select(OrderRow)
            .where(OrderRow.buyer_id == buyer_id)
            .order_by(OrderRow.order_date.desc(), OrderRow.id.desc())
            .offset(offset)
            .limit(limit)
            .options(selectinload(OrderRow.lines))
        ).scalars()
        return [self._to_domain(row) for row in rows]

    def count_for_buyer(self, buyer_id: str) -> int:
        return self._session.execute(
            select(func.count()).select_from(OrderRow).where(OrderRow.buyer_id == buyer_id)
        ).scalar_one()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(order: Order) -> OrderRow:
        return OrderRow(
            buyer_id=order.buyer_id,
            subtotal=order.subtotal.amount,
            discount=order.discount.amount,
            total=order.total.amount,
            currency=order.total.currency,
            promo_code=order.promo.code if order.promo else None,
            promo_id=order.promo.promo_id if order.promo else None,
            delivery_status=order.delivery_status.value,
            estimated_delivery_date=_to_naive_utc(order.estimated_delivery_date),
            tracking_number=order.tracking_number,
            order_date=_to_naive_utc(order.order_date),
            lines=[
                OrderLineRow(
                    position=position,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    unit_price=item.unit_price.amount,
                    quantity=item.quantity.value,
                    size=item.options.size,
                    color=item.options.color,
                )
                for position, item in enumerate(order.items)
            ],
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        currency = row.currency
        promo = None
        if row.promo_code is not None and row.promo_id is not None:
            promo = AppliedPromo(
                code=row.promo_code,
                promo_id=row.promo_id,
                discount_amount=Money(row.discount, currency),
            )
        return Order(
            id=row.id,
            buyer_id=row.buyer_id,
            items=[
                OrderLineItem(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=Quantity(line.quantity),
                    unit_price=Money(line.unit_price, currency),
                    options=SelectedOptions(size=line.size, color=line.color),
                )
                for line in row.lines
            ],
            subtotal=Money(row.subtotal, currency),
            discount=Money(row.discount, currency),
            total=Money(row.total, currency),
            estimated_delivery_date=_as_utc(row.estimated_delivery_date),
            tracking_number=row.tracking_number,
            promo=promo,
            delivery_status=DeliveryStatus(row.delivery_status),
            order_date=_as_utc(row.order_date),
        )
