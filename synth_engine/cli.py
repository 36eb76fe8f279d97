"""Command-line interface for the synthetic-asset engine."""
from __future__ import annotations

import argparse
import asyncio
import sys
import time
from decimal import Decimal, InvalidOperation

from .config import load_config
from .engine import SynthEngine
from .errors import EngineError
from .fixed_point import to_display
from .logging_setup import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="synth-engine",
        description="Over-collateralized synthetic-asset engine",
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

    sub.add_parser("prices", help="Refresh feeds and show normalized prices")

    value_parser = sub.add_parser("value", help="USD value of a collateral amount")
    value_parser.add_argument("asset", help="Collateral symbol, e.g. WETH")
    value_parser.add_argument(
        "amount", help="Amount in whole units, e.g. 1.5 (scaled by the asset decimals)"
    )

    return parser


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human amount ("1.5") to native units, rejecting excess precision."""
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount}") from None
    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value() or scaled < 0:
        raise ValueError(f"Amount {amount} not representable with {decimals} decimals")
    return int(scaled)


def _show_prices(engine: SynthEngine) -> int:
    status = 0
    now = time.time()
    for asset in engine.registry:
        try:
            quote = engine.gateway.get_quote(asset.symbol)
        except EngineError as e:
            print(f"  {asset.symbol}: unavailable ({e})")
            status = 1
            continue
        age = now - quote.observed_at
        print(f"  {asset.symbol}: ${to_display(quote.price)} ({quote.price}) age {age:.0f}s")
    return status


def _show_value(engine: SynthEngine, asset: str, amount: str) -> int:
    try:
        decimals = engine.registry.asset(asset).decimals
        units = parse_units(amount, decimals)
        usd = engine.usd_value(asset, units)
    except (EngineError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    print(f"{amount} {asset} = ${to_display(usd)} ({usd})")
    return 0


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    engine = SynthEngine(config)
    await engine.refresh_prices()

    if args.command == "prices":
        return _show_prices(engine)
    if args.command == "value":
        return _show_value(engine, args.asset, args.amount)
    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
