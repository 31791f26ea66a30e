"""FIFO lot-accounting engine: realized PnL from raw fills."""

from pnl_core.engine.aggregate import PositionAggregate
from pnl_core.engine.errors import NonFiniteValueError, PnLEngineError, ensure_finite
from pnl_core.engine.fifo import (
    FIFOPnLEngine,
    Oversell,
    compute_closed_positions,
    sort_fills,
)
from pnl_core.engine.ledger import Consumption, Lot, LotLedger
from pnl_core.engine.merge import merge_closed_positions, realized_pnl_percent
from pnl_core.engine.side import determine_side

__all__ = [
    "Consumption",
    "FIFOPnLEngine",
    "Lot",
    "LotLedger",
    "NonFiniteValueError",
    "Oversell",
    "PnLEngineError",
    "PositionAggregate",
    "compute_closed_positions",
    "determine_side",
    "ensure_finite",
    "merge_closed_positions",
    "realized_pnl_percent",
    "sort_fills",
]
