"""Outcome-to-side heuristic."""

from __future__ import annotations

from pnl_core.models.position import PositionSide


def determine_side(outcome: str) -> PositionSide:
    """Label a position Long YES or Long NO from its outcome identifier.

    Case-insensitive: "yes" or "true" anywhere in the string, or exactly "1",
    means Long YES. Anything else, including "0", "No" and token ids, is Long NO.
    This is a string heuristic and deliberately not smarter than that.
    """
    lower = outcome.lower()
    if "yes" in lower or "true" in lower or lower == "1":
        return "Long YES"
    return "Long NO"
