"""Time series over closed positions, for the PnL chart and calendar."""

from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

import numpy as np

from pnl_core.models.position import ClosedPosition


def cumulative_pnl_curve(positions: Sequence[ClosedPosition]) -> list[tuple[datetime, float]]:
    """(closed_at, running realized PnL) for fully closed positions, by close time."""
    closed = sorted(
        (p for p in positions if p.closed_at is not None),
        key=lambda p: p.closed_at,
    )
    if not closed:
        return []
    running = np.cumsum(np.array([p.realized_pnl for p in closed], dtype=np.float64))
    return [(p.closed_at, float(v)) for p, v in zip(closed, running)]


def daily_realized_pnl(positions: Sequence[ClosedPosition]) -> dict[date, float]:
    """Realized PnL summed per UTC close date, in date order."""
    by_day: dict[date, float] = {}
    for p in positions:
        if p.closed_at is None:
            continue
        day = p.closed_at.date()
        by_day[day] = by_day.get(day, 0.0) + p.realized_pnl
    return dict(sorted(by_day.items()))
