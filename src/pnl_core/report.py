"""PnL report: fetch fills, run the engine, summarize."""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from pnl_core.config.schema import PnLConfig
from pnl_core.engine import compute_closed_positions
from pnl_core.exchange.normalize import normalize_trades
from pnl_core.exchange.polymarket import PolymarketDataClient
from pnl_core.logging import get_logger
from pnl_core.metrics.summary import summarize_positions
from pnl_core.models import ClosedPosition, Fill, PositionSummary

log = get_logger(__name__)


class PnLReport(BaseModel):
    """Everything the dashboard shows for one wallet."""

    wallet: str = ""
    method: str = "fifo"
    trades_count: int = 0
    oversells: int = 0
    positions: list[ClosedPosition] = Field(default_factory=list)
    summary: PositionSummary = Field(default_factory=PositionSummary)


def build_report(
    fills: Sequence[Fill],
    config: PnLConfig | None = None,
    wallet: str = "",
) -> PnLReport:
    """Run a fresh FIFO engine over *fills* and summarize the result."""
    config = config or PnLConfig()
    positions, engine = compute_closed_positions(fills)
    summary = summarize_positions(
        positions,
        min_holding_seconds=config.min_holding_seconds,
        label_max_len=config.label_max_len,
        top_tags=config.top_tags,
    )
    log.info(
        "pnl_computed",
        trades=len(fills),
        positions=len(positions),
        oversells=engine.oversell_count,
        total_realized_pnl=summary.total_realized_pnl,
    )
    return PnLReport(
        wallet=wallet,
        method=config.method,
        trades_count=len(fills),
        oversells=engine.oversell_count,
        positions=positions,
        summary=summary,
    )


async def fetch_fills(client: PolymarketDataClient, wallet: str) -> list[Fill]:
    """Download and normalize every trade for *wallet*."""
    raw = await client.get_trades(wallet)
    return normalize_trades(raw, user=wallet)


async def build_wallet_report(
    client: PolymarketDataClient,
    wallet: str,
    config: PnLConfig | None = None,
) -> PnLReport:
    fills = await fetch_fills(client, wallet)
    return build_report(fills, config=config, wallet=wallet)
