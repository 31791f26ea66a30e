"""Compute a PnL report from the command line.

Run: python -m pnl_core --trades trades.json [--config config.yaml]
     python -m pnl_core --wallet 0xabc... [--config config.yaml]

The trades file holds a JSON list of raw trade records (the data API shape)
or an object with a "trades" list.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pnl_core.config import AppConfig, load_config
from pnl_core.exchange import PolymarketDataClient, normalize_trades
from pnl_core.logging import get_logger, setup_logging
from pnl_core.report import PnLReport, build_report, build_wallet_report

log = get_logger(__name__)


def _report_from_file(path: Path, config: AppConfig, wallet: str) -> PnLReport:
    with open(path) as f:
        body = json.load(f)
    raw = body.get("trades", []) if isinstance(body, dict) else body
    fills = normalize_trades(raw, user=wallet)
    return build_report(fills, config=config.pnl, wallet=wallet)


async def _report_from_wallet(wallet: str, config: AppConfig) -> PnLReport:
    client = PolymarketDataClient.from_config(config.data_api)
    try:
        return await build_wallet_report(client, wallet, config=config.pnl)
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="FIFO realized PnL for a Polymarket trader")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--trades", type=Path, help="JSON file of raw trade records")
    source.add_argument("--wallet", help="Fetch trades for this wallet from the data API")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (0 for compact)")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    if args.trades is not None:
        report = _report_from_file(args.trades, config, wallet="")
    else:
        report = asyncio.run(_report_from_wallet(args.wallet.lower(), config))

    sys.stdout.write(report.model_dump_json(indent=args.indent or None) + "\n")
    log.info("report_written", positions=len(report.positions), oversells=report.oversells)
    return 0


if __name__ == "__main__":
    sys.exit(main())
