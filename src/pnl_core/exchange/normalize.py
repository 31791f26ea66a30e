"""Turn raw Polymarket trade dicts into Fill models.

The data API has shipped several shapes over time: camelCase and snake_case
ids, a combined ``tokenId`` of the form ``"<conditionId>:<outcome>"``, numbers
as strings, and timestamps as unix seconds, unix milliseconds or ISO strings.
Everything is folded into the one Fill shape the engine expects.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from pnl_core.models.fill import Fill

# Unix timestamps above this are taken to be milliseconds
_MS_THRESHOLD = 10**11


class TradeNormalizationError(ValueError):
    """A raw trade record could not be turned into a Fill."""


def parse_timestamp(raw: Any) -> datetime:
    """Parse unix seconds/ms or an ISO-8601 string into an aware UTC datetime."""
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        seconds = raw / 1000 if raw > _MS_THRESHOLD else raw
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise TradeNormalizationError(f"timestamp out of range: {raw!r}") from exc
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.lstrip("-").replace(".", "", 1).isdigit():
            return parse_timestamp(float(text))
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise TradeNormalizationError(f"unparseable timestamp: {raw!r}") from exc
    else:
        raise TradeNormalizationError(f"missing or invalid timestamp: {raw!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _to_float(raw: Any, name: str) -> float:
    if raw is None or raw == "":
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise TradeNormalizationError(f"non-numeric {name}: {raw!r}") from exc
    # float() accepts "NaN" and "inf"; the engine must never see them
    if not math.isfinite(value):
        raise TradeNormalizationError(f"non-finite {name}: {raw!r}")
    return value


def _token_part(raw: dict, index: int) -> str | None:
    token = raw.get("tokenId")
    if isinstance(token, str) and ":" in token:
        part = token.split(":")[index]
        return part or None
    return None


def _condition_id(raw: dict) -> str:
    market = raw.get("market")
    return (
        raw.get("conditionId")
        or raw.get("condition_id")
        or (market.get("conditionId") if isinstance(market, dict) else None)
        or _token_part(raw, 0)
        or "unknown"
    )


def _outcome(raw: dict) -> str:
    outcome = raw.get("outcome") or _token_part(raw, 1)
    if outcome:
        return str(outcome)
    if raw.get("outcomeIndex") is not None:
        return str(raw["outcomeIndex"])
    return "0"


def normalize_trade(raw: dict, user: str = "") -> Fill:
    """Build a Fill from one raw trade record for *user*."""
    price = _to_float(raw.get("price"), "price")
    size = _to_float(raw.get("size"), "size")
    fees = _to_float(raw.get("fees", raw.get("fee")), "fees")
    side = "SELL" if str(raw.get("side") or "").upper() == "SELL" else "BUY"
    timestamp = parse_timestamp(raw.get("timestamp"))

    trade_id = (
        raw.get("id")
        or raw.get("transactionHash")
        or raw.get("hash")
        or f"{raw.get('timestamp')}-{user}-{size}"
    )

    tags = raw.get("tags")
    try:
        return Fill(
            trade_id=str(trade_id),
            timestamp=timestamp,
            user=user,
            condition_id=_condition_id(raw),
            outcome=_outcome(raw),
            side=side,
            price=price,
            size=size,
            notional=price * size,
            fees=fees,
            market_title=raw.get("marketTitle") or raw.get("title"),
            event_title=raw.get("eventTitle"),
            outcome_name=raw.get("outcomeName") or raw.get("outcome"),
            icon=raw.get("icon"),
            slug=raw.get("slug"),
            event_slug=raw.get("eventSlug"),
            category=raw.get("category"),
            tags=[str(t) for t in tags] if isinstance(tags, list) else None,
        )
    except ValidationError as exc:
        raise TradeNormalizationError(str(exc)) from exc


def normalize_trades(raw_trades: list[dict], user: str = "") -> list[Fill]:
    return [normalize_trade(raw, user) for raw in raw_trades]
