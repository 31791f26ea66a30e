"""Closed position record: the engine's output unit."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from pnl_core.models.fill import PositionKey

PositionSide = Literal["Long YES", "Long NO"]


class ClosedPosition(BaseModel):
    """Realized result of one or more sells against a (market, outcome) key.

    The engine emits one record per sell; ``merge_closed_positions`` folds records
    that share a key. ``closed_at`` stays None while quantity remains open, and
    ``open_qty_remaining`` / ``avg_open_cost`` describe that remainder.
    """

    condition_id: str
    outcome: str
    side: PositionSide
    opened_at: datetime
    closed_at: datetime | None = None

    entry_vwap: float
    exit_vwap: float
    size: float
    cost_basis: float
    proceeds: float
    realized_pnl: float
    realized_pnl_percent: float
    trades_count: int = 1

    open_qty_remaining: float | None = None
    avg_open_cost: float | None = None

    market_title: str | None = None
    event_title: str | None = None
    outcome_name: str | None = None
    icon: str | None = None
    slug: str | None = None
    event_slug: str | None = None
    category: str | None = None
    tags: list[str] | None = None

    @property
    def key(self) -> PositionKey:
        return PositionKey(self.condition_id, self.outcome)

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None
