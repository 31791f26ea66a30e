"""Fold per-sell records into one closed position per key."""

from __future__ import annotations

from typing import Iterable

from pnl_core.models.fill import PositionKey
from pnl_core.models.position import ClosedPosition


def realized_pnl_percent(realized_pnl: float, cost_basis: float) -> float:
    """Percent return on *cost_basis*.

    With no cost basis (an oversold sell) a gain reports as 100 and anything
    else as 0, so callers never see NaN or infinity. A zero-cost sell whose
    fees eat the whole notional is therefore 0 rather than a flat 100; the
    same rule runs on merged totals, which keeps merging idempotent.
    """
    if cost_basis > 0:
        return realized_pnl / cost_basis * 100
    return 100.0 if realized_pnl > 0 else 0.0


def merge_closed_positions(records: Iterable[ClosedPosition]) -> list[ClosedPosition]:
    """Merge records that share a (condition_id, outcome) key.

    Sizes, cost bases, proceeds, PnL and trade counts add up. VWAPs and the
    percent return are re-derived from the summed totals rather than
    averaged. ``closed_at`` keeps the first non-null value; the open remainder
    follows the latest record. Keys come out in first-seen order and the
    input records are left untouched.
    """
    merged: dict[PositionKey, ClosedPosition] = {}

    for record in records:
        existing = merged.get(record.key)
        if existing is None:
            merged[record.key] = record.model_copy(deep=True)
            continue

        existing.size += record.size
        existing.cost_basis += record.cost_basis
        existing.proceeds += record.proceeds
        existing.realized_pnl += record.realized_pnl
        existing.trades_count += record.trades_count

        if existing.closed_at is None and record.closed_at is not None:
            existing.closed_at = record.closed_at
        if record.opened_at < existing.opened_at:
            existing.opened_at = record.opened_at

        existing.open_qty_remaining = record.open_qty_remaining
        existing.avg_open_cost = record.avg_open_cost

    for position in merged.values():
        if position.size > 0:
            position.entry_vwap = position.cost_basis / position.size
            position.exit_vwap = position.proceeds / position.size
        position.realized_pnl_percent = realized_pnl_percent(
            position.realized_pnl, position.cost_basis
        )

    return list(merged.values())
