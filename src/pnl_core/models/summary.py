"""Portfolio-level summary of closed positions."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PositionSummary(BaseModel):
    """Headline numbers shown above the positions table."""

    total_realized_pnl: float = 0.0
    win_rate: float = 0.0
    avg_pnl_per_position: float = 0.0
    total_positions_closed: int = 0
    biggest_win: float = 0.0
    biggest_loss: float = 0.0
    avg_position_size: float = 0.0
    avg_holding_days: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    max_drawdown: float = 0.0
    most_used_category: str = "-"
    most_used_tag: str = "-"
    top_tags: list[str] = Field(default_factory=list)
