"""FIFOPnLEngine: realized PnL from a time-ordered stream of fills."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

import structlog

from pnl_core.engine.aggregate import PositionAggregate
from pnl_core.engine.errors import ensure_finite
from pnl_core.engine.ledger import LotLedger
from pnl_core.engine.merge import merge_closed_positions, realized_pnl_percent
from pnl_core.engine.side import determine_side
from pnl_core.models.fill import Fill, PositionKey
from pnl_core.models.position import ClosedPosition

log = structlog.get_logger("fifo_engine")


@dataclass(frozen=True)
class Oversell:
    """A sell that found fewer open units than it tried to close."""

    key: PositionKey
    trade_id: str
    timestamp: datetime
    requested: float
    matched: float

    @property
    def excess(self) -> float:
        return self.requested - self.matched


class FIFOPnLEngine:
    """Matches sells against earlier buys, oldest lot first.

    Feed fills in timestamp order with ``process_trade`` (ties are taken in
    the order given), then call ``closed_positions`` once for the merged
    result. The engine is stateful; use a fresh one per computation, or
    ``reset`` it in between.
    """

    def __init__(self) -> None:
        self.ledger = LotLedger()
        self._positions: dict[PositionKey, PositionAggregate] = {}
        self.anomalies: list[Oversell] = []

    @property
    def oversell_count(self) -> int:
        return len(self.anomalies)

    # ── Feeding ───────────────────────────────────────────────

    def process_trade(self, fill: Fill) -> ClosedPosition | None:
        """Apply one fill. Returns the record a sell emits, else None."""
        key = fill.key
        for name in ("price", "size", "notional", "fees"):
            ensure_finite(f"fill {name}", getattr(fill, name), key)

        position = self._positions.get(key)
        if position is None:
            position = PositionAggregate(key=key)
            self._positions[key] = position

        position.record_fill(fill)

        if fill.side == "BUY":
            self.ledger.open_lot(key, fill.size, fill.notional + fill.fees, fill.timestamp)
            return None
        return self._process_sell(fill, position)

    def process_trades(self, fills: Iterable[Fill]) -> None:
        for fill in fills:
            self.process_trade(fill)

    def _process_sell(self, fill: Fill, position: PositionAggregate) -> ClosedPosition | None:
        key = position.key
        proceeds = ensure_finite("sell proceeds", fill.notional - fill.fees, key)
        consumption = self.ledger.consume(key, fill.size)

        size = consumption.quantity
        cost_basis = consumption.cost_basis
        if consumption.shortfall > 0:
            # Unmatched units count as acquired at zero cost
            self.anomalies.append(
                Oversell(
                    key=key,
                    trade_id=fill.trade_id,
                    timestamp=fill.timestamp,
                    requested=fill.size,
                    matched=consumption.quantity,
                )
            )
            log.warning(
                "oversell_detected",
                condition_id=key.condition_id,
                outcome=key.outcome,
                trade_id=fill.trade_id,
                requested=fill.size,
                matched=consumption.quantity,
                excess=consumption.shortfall,
            )
            size = fill.size

        if size <= 0:
            return None

        realized_pnl = ensure_finite("realized pnl", proceeds - cost_basis, key)
        is_flat = position.net_qty == 0 and not self.ledger.has_open_lots(key)

        open_qty_remaining = None
        avg_open_cost = None
        if not is_flat and position.net_qty > 0:
            open_qty_remaining = position.net_qty
            lot_qty = self.ledger.open_quantity(key)
            if lot_qty > 0:
                avg_open_cost = ensure_finite(
                    "avg open cost", self.ledger.open_cost_basis(key) / lot_qty, key
                )

        record = ClosedPosition(
            condition_id=key.condition_id,
            outcome=key.outcome,
            side=determine_side(key.outcome),
            opened_at=position.opened_at,
            closed_at=fill.timestamp if is_flat else None,
            entry_vwap=ensure_finite("entry vwap", cost_basis / size, key),
            exit_vwap=ensure_finite("exit vwap", proceeds / size, key),
            size=size,
            cost_basis=cost_basis,
            proceeds=proceeds,
            realized_pnl=realized_pnl,
            realized_pnl_percent=realized_pnl_percent(realized_pnl, cost_basis),
            trades_count=1,
            open_qty_remaining=open_qty_remaining,
            avg_open_cost=avg_open_cost,
            **position.metadata_for(fill),
        )
        position.add_record(record)

        if is_flat:
            patched = position.close_pending(fill.timestamp)
            log.debug(
                "position_closed",
                condition_id=key.condition_id,
                outcome=key.outcome,
                closed_at=fill.timestamp.isoformat(),
                records_patched=patched,
            )
        return record

    # ── Results ───────────────────────────────────────────────

    def raw_closed_positions(self) -> list[ClosedPosition]:
        """Every per-sell record, grouped by key in first-seen order."""
        return [record for position in self._positions.values() for record in position.records]

    def closed_positions(self) -> list[ClosedPosition]:
        """One merged record per key that has seen at least one sell."""
        return merge_closed_positions(self.raw_closed_positions())

    def position(self, key: PositionKey) -> PositionAggregate | None:
        return self._positions.get(key)

    def reset(self) -> None:
        self.ledger.clear()
        self._positions.clear()
        self.anomalies.clear()


def sort_fills(fills: Iterable[Fill]) -> list[Fill]:
    """Stable sort by timestamp, so same-instant fills keep their input order."""
    return sorted(fills, key=lambda f: f.timestamp)


def compute_closed_positions(
    fills: Iterable[Fill],
    *,
    presorted: bool = False,
) -> tuple[list[ClosedPosition], FIFOPnLEngine]:
    """Run a fresh engine over *fills* and return the merged positions with it."""
    engine = FIFOPnLEngine()
    engine.process_trades(fills if presorted else sort_fills(fills))
    return engine.closed_positions(), engine
