"""Pure metric computation functions: no I/O, no engine state."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def win_rate(wins: int, total: int) -> float:
    """Win rate as a percentage 0-100."""
    if total <= 0:
        return 0.0
    return wins / total * 100


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit / gross loss.  *gross_loss* should be a positive number."""
    if gross_loss <= 0:
        return 0.0
    return gross_profit / gross_loss


def expectancy(win_rate_pct: float, avg_win: float, avg_loss: float) -> float:
    """Expected value per position: wr * avg_win - (1-wr) * |avg_loss|."""
    wr = win_rate_pct / 100.0
    return wr * avg_win - (1 - wr) * abs(avg_loss)


def max_drawdown(cumulative_pnl: Sequence[float]) -> float:
    """Largest peak-to-trough fall of a cumulative PnL series, in currency units.

    The series is measured from a starting balance of 0, so a book that only
    ever loses still reports its full loss.
    """
    if len(cumulative_pnl) == 0:
        return 0.0
    arr = np.concatenate(([0.0], np.asarray(cumulative_pnl, dtype=np.float64)))
    peak = np.maximum.accumulate(arr)
    return float(np.max(peak - arr))


def truncate_label(label: str, max_len: int = 20) -> str:
    """Cut *label* to *max_len* characters, ending in '...' when shortened."""
    if len(label) <= max_len:
        return label
    return label[: max_len - 3] + "..."
