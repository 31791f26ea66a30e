"""Headline summary over a list of merged closed positions."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from pnl_core.metrics.formulas import (
    expectancy,
    max_drawdown,
    profit_factor,
    truncate_label,
    win_rate,
)
from pnl_core.metrics.series import cumulative_pnl_curve
from pnl_core.models.position import ClosedPosition
from pnl_core.models.summary import PositionSummary

_SECONDS_PER_DAY = 86400.0


def avg_holding_days(
    positions: Sequence[ClosedPosition],
    min_holding_seconds: float = 60,
) -> float:
    """Mean open-to-close time in days.

    Only fully closed positions count, and only when open and close are more
    than *min_holding_seconds* apart; shorter gaps usually mean the open time
    is unknown rather than a genuine scalp.
    """
    days = []
    for p in positions:
        if p.closed_at is None:
            continue
        held = (p.closed_at - p.opened_at).total_seconds()
        if abs(held) <= min_holding_seconds:
            continue
        days.append(max(held, 0.0) / _SECONDS_PER_DAY)
    if not days:
        return 0.0
    return sum(days) / len(days)


def summarize_positions(
    positions: Sequence[ClosedPosition],
    min_holding_seconds: float = 60,
    label_max_len: int = 20,
    top_tags: int = 3,
) -> PositionSummary:
    """Aggregate stats across *positions* (one record per market outcome)."""
    if not positions:
        return PositionSummary()

    pnls = [p.realized_pnl for p in positions]
    wins = [x for x in pnls if x > 0]
    losses = [x for x in pnls if x < 0]
    total = len(positions)
    total_pnl = sum(pnls)

    category_counts = Counter(p.category for p in positions if p.category)
    tag_counts = Counter(tag for p in positions for tag in (p.tags or []))

    most_used_category = "-"
    if category_counts:
        most_used_category = truncate_label(category_counts.most_common(1)[0][0], label_max_len)
    most_used_tag = "-"
    if tag_counts:
        most_used_tag = truncate_label(tag_counts.most_common(1)[0][0], label_max_len)

    wr = win_rate(len(wins), total)
    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0
    curve = [value for _, value in cumulative_pnl_curve(positions)]

    return PositionSummary(
        total_realized_pnl=total_pnl,
        win_rate=wr,
        avg_pnl_per_position=total_pnl / total,
        total_positions_closed=total,
        biggest_win=max(max(pnls), 0.0),
        biggest_loss=min(min(pnls), 0.0),
        avg_position_size=sum(p.size for p in positions) / total,
        avg_holding_days=avg_holding_days(positions, min_holding_seconds),
        profit_factor=profit_factor(sum(wins), abs(sum(losses))),
        expectancy=expectancy(wr, avg_win, avg_loss),
        max_drawdown=max_drawdown(curve),
        most_used_category=most_used_category,
        most_used_tag=most_used_tag,
        top_tags=[truncate_label(tag, label_max_len) for tag, _ in tag_counts.most_common(top_tags)],
    )
