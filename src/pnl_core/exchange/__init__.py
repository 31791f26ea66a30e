"""Fill source: Polymarket data API client and trade normalization."""

from pnl_core.exchange.normalize import (
    TradeNormalizationError,
    normalize_trade,
    normalize_trades,
    parse_timestamp,
)
from pnl_core.exchange.polymarket import PolymarketDataClient

__all__ = [
    "PolymarketDataClient",
    "TradeNormalizationError",
    "normalize_trade",
    "normalize_trades",
    "parse_timestamp",
]
