"""Fill model: one executed buy or sell, already normalized."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

TradeSide = Literal["BUY", "SELL"]


class PositionKey(NamedTuple):
    """The (market, outcome) inventory a fill affects."""

    condition_id: str
    outcome: str


class Fill(BaseModel):
    """A single executed trade.

    ``notional`` defaults to ``price * size`` when the source omits it. The
    descriptive fields are carried for display and never enter PnL arithmetic.
    """

    model_config = ConfigDict(frozen=True)

    trade_id: str
    timestamp: datetime
    condition_id: str
    outcome: str
    side: TradeSide
    price: float
    size: float
    notional: float
    fees: float = 0.0
    user: str = ""

    market_title: str | None = None
    event_title: str | None = None
    outcome_name: str | None = None
    icon: str | None = None
    slug: str | None = None
    event_slug: str | None = None
    category: str | None = None
    tags: list[str] | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _derive_notional(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("notional") is None:
            try:
                data = {**data, "notional": float(data["price"]) * float(data["size"])}
            except (KeyError, TypeError, ValueError):
                # Leave it to field validation to report the bad price/size
                pass
        return data

    @property
    def key(self) -> PositionKey:
        return PositionKey(self.condition_id, self.outcome)
