"""Pydantic domain models."""

from pnl_core.models.fill import Fill, PositionKey, TradeSide
from pnl_core.models.position import ClosedPosition, PositionSide
from pnl_core.models.summary import PositionSummary

__all__ = [
    "ClosedPosition",
    "Fill",
    "PositionKey",
    "PositionSide",
    "PositionSummary",
    "TradeSide",
]
