"""Abstract unit of work — one atomic scope over every repository.

Everything done through the repositories of an entered unit of work is
either made durable by ``commit()`` or discarded.  Leaving the ``with``
block without committing rolls back, so an exception at any point
leaves the stores exactly as they were.

Implementations must bound how long they wait for locks and raise
TransientCheckoutError when that bound is hit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.inventory_ledger import InventoryLedger
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.promo_code_repository import PromoCodeRepository


class UnitOfWork(ABC):

    products: ProductRepository
    inventory: InventoryLedger
    promo_codes: PromoCodeRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes.  A no-op after commit."""
