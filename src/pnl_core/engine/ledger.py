"""Lot ledger: per-key FIFO queues of open buy lots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime

from pnl_core.engine.errors import ensure_finite
from pnl_core.models.fill import PositionKey


@dataclass
class Lot:
    """An open slice of bought quantity and what it cost (fees included)."""

    qty: float
    cost_basis: float
    timestamp: datetime

    @property
    def unit_cost(self) -> float:
        return self.cost_basis / self.qty if self.qty > 0 else 0.0


@dataclass(frozen=True)
class Consumption:
    """Result of pulling quantity off the head of a key's lot queue."""

    requested: float
    quantity: float
    cost_basis: float

    @property
    def shortfall(self) -> float:
        """Requested quantity the ledger could not supply (0 when fully matched)."""
        return max(self.requested - self.quantity, 0.0)


class LotLedger:
    """Open lots per position key, consumed oldest-first.

    The ledger only reports facts: consuming more than is open returns what
    was found and leaves the shortfall for the caller to handle.
    """

    def __init__(self) -> None:
        self._lots: dict[PositionKey, deque[Lot]] = {}

    def open_lot(
        self,
        key: PositionKey,
        quantity: float,
        cost_basis: float,
        timestamp: datetime,
    ) -> Lot:
        """Append a lot to the tail of *key*'s queue."""
        lot = Lot(
            qty=ensure_finite("lot quantity", quantity, key),
            cost_basis=ensure_finite("lot cost basis", cost_basis, key),
            timestamp=timestamp,
        )
        self._lots.setdefault(key, deque()).append(lot)
        return lot

    def consume(self, key: PositionKey, quantity: float) -> Consumption:
        """Remove up to *quantity* units from the head of *key*'s queue.

        Whole lots are popped while they fit; the last lot touched is shrunk
        in proportion so its unit cost is unchanged.
        """
        queue = self._lots.get(key)
        remaining = quantity
        consumed_qty = 0.0
        consumed_cost = 0.0

        while remaining > 0 and queue:
            head = queue[0]
            if head.qty <= remaining:
                consumed_qty += head.qty
                consumed_cost += head.cost_basis
                remaining -= head.qty
                queue.popleft()
            else:
                ratio = remaining / head.qty
                consumed_qty += remaining
                consumed_cost += head.cost_basis * ratio
                head.qty -= remaining
                head.cost_basis *= 1 - ratio
                remaining = 0.0

        if queue is not None and not queue:
            del self._lots[key]

        return Consumption(
            requested=quantity,
            quantity=ensure_finite("consumed quantity", consumed_qty, key),
            cost_basis=ensure_finite("consumed cost basis", consumed_cost, key),
        )

    def lots(self, key: PositionKey) -> tuple[Lot, ...]:
        """Snapshot of *key*'s open lots, oldest first."""
        return tuple(self._lots.get(key, ()))

    def has_open_lots(self, key: PositionKey) -> bool:
        return bool(self._lots.get(key))

    def open_quantity(self, key: PositionKey) -> float:
        return sum(lot.qty for lot in self._lots.get(key, ()))

    def open_cost_basis(self, key: PositionKey) -> float:
        return sum(lot.cost_basis for lot in self._lots.get(key, ()))

    def keys(self) -> list[PositionKey]:
        return list(self._lots)

    def clear(self) -> None:
        self._lots.clear()
