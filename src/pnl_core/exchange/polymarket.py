"""Polymarket data API client: a user's trade history.

The data API (data-api.polymarket.com) serves ``/trades`` as a bare JSON list
with limit/offset pagination, capped at 500 rows per page and an offset of
10,000. Some deployments wrap the page as ``{"data": [...]}``; both are
accepted.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pnl_core.config.schema import DataApiConfig

log = structlog.get_logger("polymarket_data")


class PolymarketDataClient:
    """Async client for the Polymarket data API."""

    def __init__(
        self,
        base_url: str = "https://data-api.polymarket.com",
        page_size: int = 500,
        max_offset: int = 10000,
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.max_offset = max_offset
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: DataApiConfig, **kwargs: Any) -> "PolymarketDataClient":
        return cls(
            base_url=config.base_url,
            page_size=config.page_size,
            max_offset=config.max_offset,
            timeout_s=config.timeout_s,
            **kwargs,
        )

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=self.timeout_s,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def get_trades(self, user: str) -> list[dict]:
        """Fetch every trade for *user*, oldest pages last as the API serves them.

        Stops on a short or empty page, or at ``max_offset``. Rows repeated
        across pages (the API is not snapshot-consistent) are dropped.
        """
        http = await self._get_http()
        trades: list[dict] = []
        seen: set[str] = set()
        offset = 0

        while offset <= self.max_offset:
            params: dict[str, Any] = {
                "user": user.lower(),
                "limit": self.page_size,
                "offset": offset,
            }
            resp = await http.get(f"{self.base_url}/trades", params=params)
            resp.raise_for_status()
            page = self._extract_page(resp.json())
            if not page:
                break

            for row in page:
                trade_id = self.trade_identity(row)
                if trade_id in seen:
                    continue
                seen.add(trade_id)
                trades.append(row)

            if len(page) < self.page_size:
                break
            offset += self.page_size

        log.info("trades_fetched", count=len(trades), pages=offset // self.page_size + 1)
        return trades

    @staticmethod
    def _extract_page(body: Any) -> list[dict]:
        if isinstance(body, dict) and isinstance(body.get("data"), list):
            body = body["data"]
        if isinstance(body, list):
            return [row for row in body if isinstance(row, dict)]
        return []

    @staticmethod
    def trade_identity(row: dict) -> str:
        """Best-effort unique id for a raw trade row, used for de-duplication."""
        if row.get("id"):
            return str(row["id"])
        # One transaction can fill several outcomes or price levels
        return "|".join(
            str(row.get(k, ""))
            for k in ("transactionHash", "timestamp", "conditionId", "outcome", "side", "size", "price")
        )
