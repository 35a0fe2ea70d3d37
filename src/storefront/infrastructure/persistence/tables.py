"""SQLAlchemy table definitions for the authoritative store.

Money columns hold decimal strings so amounts round-trip exactly on
every backend.  Datetimes are stored as naive UTC.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class DecimalString(TypeDecorator):
    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        return None if value is None else str(value)

    def process_result_value(self, value: Any, dialect: Any) -> Decimal | None:
        return None if value is None else Decimal(value)


class Base(DeclarativeBase):
    pass


class ProductRow(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("stock_quantity >= 0", name="stock_not_negative"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    base_price: Mapped[Decimal] = mapped_column(DecimalString)
    size_prices: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)
    in_stock: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    delivery_lead_days: Mapped[int | None] = mapped_column(Integer, nullable=True)


class PromoCodeRow(Base):
    __tablename__ = "promo_codes"
    __table_args__ = (CheckConstraint("used_count >= 0", name="used_count_not_negative"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    description: Mapped[str] = mapped_column(String(200), default="")
    discount_type: Mapped[str] = mapped_column(String(20))
    discount_value: Mapped[Decimal] = mapped_column(DecimalString)
    minimum_order_amount: Mapped[Decimal] = mapped_column(DecimalString)
    maximum_discount_amount: Mapped[Decimal | None] = mapped_column(DecimalString, nullable=True)
    expiry_date: Mapped[datetime] = mapped_column(DateTime)
    usage_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    used_count: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    applicable_categories: Mapped[list[str]] = mapped_column(JSON, default=list)
    excluded_categories: Mapped[list[str]] = mapped_column(JSON, default=list)


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    buyer_id: Mapped[str] = mapped_column(String(64), index=True)
    subtotal: Mapped[Decimal] = mapped_column(DecimalString)
    discount: Mapped[Decimal] = mapped_column(DecimalString)
    total: Mapped[Decimal] = mapped_column(DecimalString)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    promo_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    promo_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    delivery_status: Mapped[str] = mapped_column(String(20))
    estimated_delivery_date: Mapped[datetime] = mapped_column(DateTime)
    tracking_number: Mapped[str] = mapped_column(String(20))
    order_date: Mapped[datetime] = mapped_column(DateTime, index=True)

    lines: Mapped[list[OrderLineRow]] = relationship(
        back_populates="order",
        order_by="OrderLineRow.position",
        cascade="all, delete-orphan",
    )


class OrderLineRow(Base):
    __tablename__ = "order_lines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    product_id: Mapped[str] = mapped_column(String(64), index=True)
    product_name: Mapped[str] = mapped_column(String(200))
    unit_price: Mapped[Decimal] = mapped_column(DecimalString)
    quantity: Mapped[int] = mapped_column(Integer)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)

    order: Mapped[OrderRow] = relationship(back_populates="lines")
