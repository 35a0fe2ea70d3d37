"""Outcome of an inventory ledger mutation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReservationResult:
    """``ok`` tells whether the stock changed.

    ``new_stock`` is the stock after the operation, or the stock that was
    available when a reservation was rejected.
    """

    ok: bool
    new_stock: int

    @property
    def in_stock(self) -> bool:
        return self.new_stock > 0

    @staticmethod
    def accepted(new_stock: int) -> ReservationResult:
        return ReservationResult(ok=True, new_stock=new_stock)

    @staticmethod
    def rejected(available: int) -> ReservationResult:
        return ReservationResult(ok=False, new_stock=available)
