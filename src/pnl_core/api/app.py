"""FastAPI application for the PnL dashboard backend."""

import os
import re
from datetime import datetime, timezone

import httpx
import structlog
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from pnl_core.api.cache import TTLCache
from pnl_core.config.loader import load_config
from pnl_core.engine import sort_fills
from pnl_core.exchange.normalize import TradeNormalizationError
from pnl_core.exchange.polymarket import PolymarketDataClient
from pnl_core.models import Fill
from pnl_core.report import PnLReport, build_report, fetch_fills

logger = structlog.get_logger()

WALLET_RE = re.compile(r"^0x[a-f0-9]{40}$")

app = FastAPI(
    title="Polymarket PnL API",
    description="Realized PnL reconstructed from a wallet's trade history",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Load config once at startup
config = load_config(os.environ.get("PNL_CONFIG"))

_report_cache: TTLCache[PnLReport] = TTLCache(ttl_seconds=config.pnl.cache_ttl_s)
_client: PolymarketDataClient | None = None


def get_client() -> PolymarketDataClient:
    """Dependency returning the shared data API client."""
    global _client
    if _client is None:
        _client = PolymarketDataClient.from_config(config.data_api)
    return _client


def validate_wallet(wallet: str) -> str:
    """Trim and lower-case *wallet*; 400 unless it is 0x + 40 hex chars."""
    normalized = wallet.strip().lower()
    if not WALLET_RE.match(normalized):
        raise HTTPException(
            status_code=400,
            detail="Invalid wallet address format. Must be 0x followed by 40 hexadecimal characters.",
        )
    return normalized


async def _load_fills(client: PolymarketDataClient, wallet: str) -> list[Fill]:
    try:
        return await fetch_fills(client, wallet)
    except httpx.HTTPError as e:
        logger.error("trades_fetch_failed", error=str(e))
        raise HTTPException(status_code=502, detail="Failed to fetch trades from Polymarket")
    except TradeNormalizationError as e:
        logger.error("trades_normalize_failed", error=str(e))
        raise HTTPException(status_code=502, detail=f"Malformed trade data: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the shared HTTP client."""
    if _client is not None:
        await _client.close()


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/pnl", response_model=PnLReport)
async def get_pnl(
    wallet: str = Query(..., description="Trader wallet address"),
    client: PolymarketDataClient = Depends(get_client),
):
    """Closed positions and summary for a wallet, FIFO-matched."""
    wallet = validate_wallet(wallet)

    cached = _report_cache.get(wallet)
    if cached is not None:
        return cached

    fills = await _load_fills(client, wallet)
    report = build_report(fills, config=config.pnl, wallet=wallet)
    _report_cache.set(wallet, report)
    return report


@app.get("/api/trades", response_model=list[Fill])
async def get_trades(
    wallet: str = Query(..., description="Trader wallet address"),
    client: PolymarketDataClient = Depends(get_client),
):
    """Normalized fills for a wallet, oldest first."""
    wallet = validate_wallet(wallet)
    fills = await _load_fills(client, wallet)
    return sort_fills(fills)
