"""Summary metrics and series over closed positions."""

from pnl_core.metrics.formulas import (
    expectancy,
    max_drawdown,
    profit_factor,
    truncate_label,
    win_rate,
)
from pnl_core.metrics.series import cumulative_pnl_curve, daily_realized_pnl
from pnl_core.metrics.summary import avg_holding_days, summarize_positions

__all__ = [
    "avg_holding_days",
    "cumulative_pnl_curve",
    "daily_realized_pnl",
    "expectancy",
    "max_drawdown",
    "profit_factor",
    "summarize_positions",
    "truncate_label",
    "win_rate",
]
