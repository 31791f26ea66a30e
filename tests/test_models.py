"""Tests for Pydantic domain models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pnl_core.models import ClosedPosition, Fill, PositionKey, PositionSummary

NOW = datetime.now(timezone.utc)


class TestFill:
    def test_notional_derived_from_price_and_size(self):
        f = Fill(
            trade_id="t1",
            timestamp=NOW,
            condition_id="0xabc",
            outcome="Yes",
            side="BUY",
            price=0.42,
            size=100,
        )
        assert f.notional == pytest.approx(42.0)
        assert f.fees == 0.0
        assert f.tags is None

    def test_explicit_notional_kept(self):
        f = Fill(
            trade_id="t1",
            timestamp=NOW,
            condition_id="0xabc",
            outcome="Yes",
            side="SELL",
            price=0.5,
            size=10,
            notional=4.9,
        )
        assert f.notional == 4.9

    def test_key(self):
        f = Fill(
            trade_id="t1", timestamp=NOW, condition_id="0xabc", outcome="No",
            side="BUY", price=0.5, size=1,
        )
        assert f.key == PositionKey("0xabc", "No")
        assert f.key.condition_id == "0xabc"

    def test_invalid_side(self):
        with pytest.raises(ValidationError):
            Fill(
                trade_id="t1", timestamp=NOW, condition_id="0xabc", outcome="Yes",
                side="HOLD", price=0.5, size=1,
            )

    def test_missing_price_reported(self):
        with pytest.raises(ValidationError):
            Fill(trade_id="t1", timestamp=NOW, condition_id="0xabc", outcome="Yes", side="BUY", size=1)

    def test_frozen(self):
        f = Fill(
            trade_id="t1", timestamp=NOW, condition_id="0xabc", outcome="Yes",
            side="BUY", price=0.5, size=1,
        )
        with pytest.raises(ValidationError):
            f.size = 2


class TestClosedPosition:
    def test_open_record(self):
        p = ClosedPosition(
            condition_id="0xabc",
            outcome="Yes",
            side="Long YES",
            opened_at=NOW,
            entry_vwap=0.5,
            exit_vwap=0.6,
            size=30,
            cost_basis=15,
            proceeds=18,
            realized_pnl=3,
            realized_pnl_percent=20,
            open_qty_remaining=70,
            avg_open_cost=0.5,
        )
        assert not p.is_closed
        assert p.trades_count == 1
        assert p.key == PositionKey("0xabc", "Yes")

    def test_invalid_side(self):
        with pytest.raises(ValidationError):
            ClosedPosition(
                condition_id="0xabc",
                outcome="Yes",
                side="Short",
                opened_at=NOW,
                entry_vwap=0.5,
                exit_vwap=0.6,
                size=30,
                cost_basis=15,
                proceeds=18,
                realized_pnl=3,
                realized_pnl_percent=20,
            )


class TestPositionSummary:
    def test_empty_defaults(self):
        s = PositionSummary()
        assert s.total_positions_closed == 0
        assert s.most_used_category == "-"
        assert s.top_tags == []
