"""Per-key running totals and the records emitted for that key."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pnl_core.engine.errors import ensure_finite
from pnl_core.models.fill import Fill, PositionKey
from pnl_core.models.position import ClosedPosition

_METADATA_FIELDS = (
    "market_title",
    "event_title",
    "outcome_name",
    "icon",
    "slug",
    "event_slug",
    "category",
    "tags",
)


@dataclass
class PositionAggregate:
    """Running state for one (market, outcome) key.

    ``records`` is the arena of every record emitted for the key, in emission
    order. ``pending_close`` holds indices into it for records that have not
    yet seen the position go flat.
    """

    key: PositionKey
    total_bought: float = 0.0
    total_sold: float = 0.0
    net_qty: float = 0.0
    total_buy_value: float = 0.0
    total_sell_value: float = 0.0
    total_fees: float = 0.0
    first_buy_time: datetime | None = None
    last_sell_time: datetime | None = None
    fills: list[Fill] = field(default_factory=list)
    records: list[ClosedPosition] = field(default_factory=list)
    pending_close: list[int] = field(default_factory=list)

    def record_fill(self, fill: Fill) -> None:
        """Fold *fill* into the running totals."""
        self.fills.append(fill)
        self.total_fees = ensure_finite("total fees", self.total_fees + fill.fees, self.key)

        if fill.side == "BUY":
            self.total_bought += fill.size
            self.net_qty += fill.size
            self.total_buy_value = ensure_finite(
                "total buy value", self.total_buy_value + fill.notional + fill.fees, self.key
            )
            if self.first_buy_time is None or fill.timestamp < self.first_buy_time:
                self.first_buy_time = fill.timestamp
        else:
            self.total_sold += fill.size
            self.net_qty -= fill.size
            self.total_sell_value = ensure_finite(
                "total sell value", self.total_sell_value + fill.notional - fill.fees, self.key
            )
            self.last_sell_time = fill.timestamp

        ensure_finite("net quantity", self.net_qty, self.key)

    @property
    def opened_at(self) -> datetime | None:
        """Earliest buy, or the first fill seen when the key was never bought."""
        if self.first_buy_time is not None:
            return self.first_buy_time
        return self.fills[0].timestamp if self.fills else None

    def metadata_for(self, fill: Fill) -> dict:
        """Descriptive fields from *fill*, falling back to the key's first fill."""
        first = self.fills[0] if self.fills else None
        meta = {}
        for name in _METADATA_FIELDS:
            value = getattr(fill, name)
            if not value and first is not None:
                value = getattr(first, name)
            meta[name] = value
        return meta

    def add_record(self, record: ClosedPosition) -> int:
        """Store *record* in the arena; remember it if it is still open."""
        index = len(self.records)
        self.records.append(record)
        if record.closed_at is None:
            self.pending_close.append(index)
        return index

    def close_pending(self, closed_at: datetime) -> int:
        """Stamp every still-open record with *closed_at*. Returns how many."""
        for index in self.pending_close:
            self.records[index].closed_at = closed_at
        patched = len(self.pending_close)
        self.pending_close.clear()
        return patched
