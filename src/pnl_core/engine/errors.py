"""Engine exceptions."""

from __future__ import annotations

import math

from pnl_core.models.fill import PositionKey


class PnLEngineError(Exception):
    """Base class for errors raised by the PnL engine."""


class NonFiniteValueError(PnLEngineError, ArithmeticError):
    """A NaN or infinite value showed up in lot or position arithmetic."""

    def __init__(self, name: str, value: float, key: PositionKey | None = None) -> None:
        self.name = name
        self.value = value
        self.key = key
        where = f" for {key.condition_id}:{key.outcome}" if key is not None else ""
        super().__init__(f"non-finite {name}{where}: {value!r}")


def ensure_finite(name: str, value: float, key: PositionKey | None = None) -> float:
    """Return *value* unchanged, raising NonFiniteValueError for NaN/inf."""
    if not math.isfinite(value):
        raise NonFiniteValueError(name, value, key)
    return value
