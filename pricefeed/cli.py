"""Command-line interface for the oracle price feed client."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys

from .chains.evm import EvmClient
from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .oracles import MultiPriceOracle
from .report import format_quotes, format_usd_prices, outcomes_to_dicts
from .services import PriceFeedClient


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="pricefeed",
        description="Query symbol-keyed on-chain price oracles",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    prices_parser = sub.add_parser(
        "prices", help="Price, decimals, description and update time per symbol"
    )
    usd_parser = sub.add_parser("usd", help="Fixed-scale USD price per symbol")

    for p in (prices_parser, usd_parser):
        p.add_argument(
            "symbols",
            nargs="*",
            help="Symbols to query (default: oracle.symbols from config)",
        )
        p.add_argument("--json", action="store_true", help="Print JSON output")

    return parser


def build_client(config: AppConfig) -> PriceFeedClient:
    """Wire the chain client, oracle reader and price feed client together."""
    oracle = MultiPriceOracle(EvmClient(config.chain), config.oracle)
    return PriceFeedClient(oracle, config.client)


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit status."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    symbols = [s.upper() for s in args.symbols] or list(config.oracle.symbols)
    if not symbols:
        print("No symbols given and none configured under oracle.symbols", file=sys.stderr)
        return 2

    client = build_client(config)

    if args.command == "prices":
        outcomes = await client.fetch_all(symbols)
        text = format_quotes(outcomes)
    else:
        outcomes = await client.fetch_usd_prices(symbols)
        text = format_usd_prices(outcomes)

    if args.json:
        print(json.dumps(outcomes_to_dicts(outcomes), indent=2))
    else:
        print(text)
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
