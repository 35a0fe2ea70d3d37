"""Application service: Order History use case (query).

Server-side pagination with a fixed page size, newest orders first.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from storefront.application.dto import OrderPageDTO, order_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.unit_of_work import UnitOfWork

ORDER_HISTORY_PAGE_SIZE = 10


class ListOrdersHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, buyer_id: str | None, page: int = 1) -> OrderPageDTO:
        if not buyer_id:
            raise ValidationError("Please log in to view order history")
        page = max(page, 1)

        with self._uow_factory() as uow:
            total_orders = uow.orders.count_for_buyer(buyer_id)
            orders = uow.orders.list_for_buyer(
                buyer_id,
                offset=(page - 1) * ORDER_HISTORY_PAGE_SIZE,
                limit=ORDER_HISTORY_PAGE_SIZE,
            )

        return OrderPageDTO(
            orders=[order_to_dto(o) for o in orders],
            page=page,
            total_pages=math.ceil(total_orders / ORDER_HISTORY_PAGE_SIZE),
            total_orders=total_orders,
        )
