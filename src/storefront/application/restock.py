"""Application service: Restock use case.

Returns units to a product's stock through the inventory ledger.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockLevelDTO:
    product_id: str
    stock_quantity: int
    in_stock: bool


class RestockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: str, quantity: int) -> StockLevelDTO:
        qty = Quantity(quantity).value
        with self._uow_factory() as uow:
            if uow.inventory.stock_of(product_id) is None:
                raise EntityNotFoundError(f"Product not found: '{product_id}'")
            result = uow.inventory.release(product_id, qty)
            uow.commit()

        logger.info("Product restocked", product_id=product_id, added=qty, stock=result.new_stock)
        return StockLevelDTO(
            product_id=product_id,
            stock_quantity=result.new_stock,
            in_stock=result.in_stock,
        )
