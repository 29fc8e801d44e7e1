from __future__ import annotations

from swapbot.logging.logger import init_logging, get_logger

init_logging()

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from swapbot.core.swap_pipeline import run_swap

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swapbot",
        description="BSC Swap Bot - swap BNB for a token via the most liquid Dexscreener pool",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    swap = subparsers.add_parser("swap", help="Swap BNB for a token")
    swap.add_argument("token_address", help="Token contract address to buy")
    swap.add_argument("--amount", required=True, help="Amount of BNB to swap (e.g. 0.01)")
    swap.add_argument("--slippage", default=None, help="Slippage tolerance in percent (default: from config or 1%%)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    log.info("Starting swap: %s amount=%s slippage=%s", args.token_address, args.amount,
             args.slippage if args.slippage is not None else "default")
    try:
        asyncio.run(run_swap(args.token_address, args.amount, args.slippage))
    except Exception as exc:
        log.error("Fatal: %s", exc, exc_info=log.isEnabledFor(logging.DEBUG))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
