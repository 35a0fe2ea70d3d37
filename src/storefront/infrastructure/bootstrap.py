"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from sqlalchemy import Engine

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
)
from storefront.infrastructure.persistence.json_cart_store import JsonCartStore
from storefront.infrastructure.persistence.sqlalchemy_unit_of_work import (
    SqlAlchemyUnitOfWork,
)
from storefront.infrastructure.settings import Settings


def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=None)
def _engine(database_url: str, lock_timeout_seconds: float) -> Engine:
    return build_engine(database_url, lock_timeout_seconds)


def engine() -> Engine:
    cfg = settings()
    if cfg.database_url.startswith("sqlite:///"):
        cfg.data_dir.mkdir(parents=True, exist_ok=True)
    return _engine(cfg.database_url, cfg.lock_timeout_seconds)


def unit_of_work_factory() -> Callable[[], UnitOfWork]:
    session_factory = build_session_factory(engine())
    return lambda: SqlAlchemyUnitOfWork(session_factory)


def cart_store() -> JsonCartStore:
    return JsonCartStore(settings().data_dir / "carts.json")
