"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order and assign its ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_for_buyer(
        self,
        buyer_id: str,
        offset: int,
        limit: int,
    ) -> list[Order]:
        """Return a buyer's orders, newest first by order date."""

    @abstractmethod
    def count_for_buyer(self, buyer_id: str) -> int:
        """Return how many orders a buyer has placed."""
