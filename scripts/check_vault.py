#!/usr/bin/env python3
"""
Utility: show what the bot would do right now, without touching the chain.

Reads the subgraph endpoint and vault address from `config/secrets.env` (if
present) and prints:
- the vault's comptroller and tracked assets
- the current lunar age and trade window
- whether the configured pair is tracked by the vault
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.data.subgraph import EnzymeSubgraphClient  # noqa: E402
from src.strategy.lunar import classify_phase, lunar_age  # noqa: E402
from src.utils.config_loader import load_config, require_env  # noqa: E402
from src.vault.assets import resolve_asset, same_address  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    env_path = Path(__file__).resolve().parents[1] / "config" / "secrets.env"
    if env_path.exists():
        load_dotenv(env_path)
        logger.info("Loaded environment variables from %s", env_path)

    try:
        config = load_config()
        network = config["network"]
        endpoint = require_env(f"{network}_SUBGRAPH_ENDPOINT")
        vault_address = require_env("ENZYME_VAULT_ADDRESS")
    except (ValueError, FileNotFoundError) as e:
        raise SystemExit(str(e)) from e

    snapshot = EnzymeSubgraphClient(endpoint).get_vault(vault_address)

    print(f"\nVault:       {snapshot.name or '?'} ({snapshot.vault_address})")
    print(f"Network:     {network}")
    print(f"Comptroller: {snapshot.comptroller_id or 'MISSING'}")
    print("Tracked assets:")
    for a in snapshot.tracked_assets:
        print(f"- {a.symbol or '?':<8} {a.id}")

    trading = config["trading"]
    for label in ("primary_asset", "secondary_asset"):
        wanted = str(trading[label]).lower()
        found = resolve_asset(snapshot, wanted)
        tracked = found is not None and same_address(found.id, wanted)
        print(f"{label}: {wanted} {'tracked' if tracked else 'NOT tracked'}")

    age = lunar_age()
    print(f"\nLunar age: {age:.2f} days -> {classify_phase(age).value}")


if __name__ == "__main__":
    main()
