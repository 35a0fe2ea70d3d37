"""Fixtures for tests that run against a real SQLite file."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.model.product import Product
from storefront.domain.model.promo_code import DiscountType, PromoCode
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from storefront.infrastructure.persistence.sqlalchemy_unit_of_work import (
    SqlAlchemyUnitOfWork,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'store.db'}"


@pytest.fixture
def engine(database_url):
    engine = build_engine(database_url, lock_timeout_seconds=5.0)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine):
    session_factory = build_session_factory(engine)
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@pytest.fixture
def seeded(uow_factory):
    """Widget, Gadget and a single-use SAVE10 code."""
    with uow_factory() as uow:
        uow.products.save(Product(id="1", name="Widget", base_price=Money.of("10.00"),
                                  stock_quantity=10, category="tools", delivery_lead_days=3))
        uow.products.save(Product(id="2", name="Gadget", base_price=Money.of("5.50"),
                                  stock_quantity=10, category="toys",
                                  size_prices={"XL": Money.of("6.25")}))
        uow.promo_codes.save(PromoCode.create(
            id="p1",
            code="SAVE10",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            expiry_date=NOW + timedelta(days=30),
            usage_limit=1,
        ))
        uow.commit()
    return uow_factory
