"""Enzyme Moon Bot entrypoint.

This file intentionally stays small. The loop lives in `src/trader/runner.py`
so it can be maintained and tested more easily.

Usage:
    python main.py                 # run forever, one iteration per interval
    python main.py --iterations 1  # single pass, then exit
    python main.py --dry-run       # simulate and price, never broadcast
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from dotenv import load_dotenv


def _load_local_secrets() -> None:
    """Load RPC URLs, keys and the vault address for local runs (ignored by git)."""
    env_path = Path(__file__).resolve().parent / "config" / "secrets.env"
    if env_path.exists():
        load_dotenv(env_path)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lunar-cycle Uniswap V3 trader for an Enzyme vault.")
    parser.add_argument("--iterations", type=int, default=None, help="Stop after N iterations (default: run forever).")
    parser.add_argument("--dry-run", action="store_true", help="Validate and price transactions without sending them.")
    parser.add_argument("--network", choices=["ETHEREUM", "POLYGON"], default=None, help="Override config.yaml network.")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    _load_local_secrets()

    # CLI flags win over secrets.env and config.yaml (applied as env overrides by the config loader).
    if args.dry_run:
        os.environ["ENZYME_BOT_DRY_RUN"] = "1"
    if args.network:
        os.environ["ENZYME_BOT_NETWORK"] = args.network

    from src.trader.runner import main as runner_main

    runner_main(max_iterations=args.iterations)


if __name__ == "__main__":
    main()
