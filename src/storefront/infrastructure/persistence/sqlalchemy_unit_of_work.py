"""SQLAlchemy implementation of UnitOfWork — one session, one transaction."""

from __future__ import annotations

import structlog
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.exceptions import TransientCheckoutError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sqlalchemy_repositories import (
    SqlAlchemyInventoryLedger,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyPromoCodeRepository,
)

logger = structlog.get_logger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Create one per operation; the instance is not shared between threads."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> UnitOfWork:
        self._session = self._session_factory()
        self.products = SqlAlchemyProductRepository(self._session)
        self.inventory = SqlAlchemyInventoryLedger(self._session)
        self.promo_codes = SqlAlchemyPromoCodeRepository(self._session)
        self.orders = SqlAlchemyOrderRepository(self._session)
        return super().__enter__()

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            if self._session is not None:
                self._session.close()
                self._session = None

        if exc is not None and isinstance(exc, OperationalError):
            logger.warning("Database unavailable, transaction rolled back", error=str(exc.orig))
            raise TransientCheckoutError(
                "The store is busy right now and nothing was changed; please try again"
            ) from exc

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of work used outside its with block")
        self._session.commit()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
