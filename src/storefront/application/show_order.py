"""Application service: Show Order use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int, buyer_id: str | None = None) -> OrderDTO:
        """Return one order.  With ``buyer_id``, only that buyer's orders are visible."""
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None or (buyer_id is not None and order.buyer_id != buyer_id):
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)
