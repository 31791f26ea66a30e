"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from pnl_core.models import Fill

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_fill():
    """Factory for Fills with one-minute-spaced timestamps by default.

    ``make_fill("BUY", 100, 0.5)`` -> BUY 100 @ 0.50 on (C1, "1").
    """
    seq = count(1)

    def _make(
        side: str,
        size: float,
        price: float,
        fees: float = 0.0,
        condition_id: str = "C1",
        outcome: str = "1",
        ts: datetime | None = None,
        **extra,
    ) -> Fill:
        n = next(seq)
        return Fill(
            trade_id=extra.pop("trade_id", f"T{n}"),
            timestamp=ts or T0 + timedelta(minutes=n),
            condition_id=condition_id,
            outcome=outcome,
            side=side,
            price=price,
            size=size,
            notional=extra.pop("notional", None),
            fees=fees,
            **extra,
        )

    return _make
