from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from src.chain.connection import ChainConnection
from src.chain.erc20 import ERC20BalanceReader
from src.chain.uniswap import DEFAULT_FEE_TIERS, UniswapV3PriceOracle
from src.data.gas_price import create_gas_oracle
from src.data.subgraph import EnzymeSubgraphClient
from src.domain.models import AssetPair, VaultSnapshot
from src.ports.collaborators import BalancePort, PriceRoutePort
from src.trading.submitter import DEFAULT_RECEIPT_TIMEOUT_SECONDS, TransactionSubmitter
from src.utils.config_loader import network_config, require_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Everything an iteration needs, built once at startup and never mutated."""

    network: str
    vault_address: str
    sender: str
    pair: AssetPair
    trade_size_bps: int
    snapshot: VaultSnapshot
    adapter: str | None
    integration_manager: str | None
    balances: BalancePort
    price_oracle: PriceRoutePort
    submitter: TransactionSubmitter

    @property
    def comptroller(self) -> str | None:
        return self.snapshot.comptroller_id


def create_session(config: dict[str, Any]) -> Session:
    """
    Resolve secrets, connect to the chain and load the vault snapshot.

    Any failure here is fatal: the bot does not start with a partial session.
    """
    network = config["network"]
    net = network_config(config)
    trading = config.get("trading", {}) or {}

    subgraph_endpoint = require_env(f"{network}_SUBGRAPH_ENDPOINT")
    vault_address = require_env("ENZYME_VAULT_ADDRESS")
    gas_oracle = create_gas_oracle(net)

    conn = ChainConnection(network, chain_id=int(net["chain_id"]))
    if not conn.connect():
        raise RuntimeError(f"Could not connect to the {network} RPC node")

    snapshot = EnzymeSubgraphClient(subgraph_endpoint).get_vault(vault_address)

    enzyme = net.get("enzyme", {}) or {}
    uniswap = net.get("uniswap", {}) or {}

    submitter = TransactionSubmitter(
        conn.w3.eth,
        conn.account,
        gas_oracle,
        chain_id=conn.chain_id,
        dry_run=bool(trading.get("dry_run", False)),
        receipt_timeout_seconds=float(trading.get("receipt_timeout_seconds", DEFAULT_RECEIPT_TIMEOUT_SECONDS)),
    )

    session = Session(
        network=network,
        vault_address=vault_address,
        sender=conn.address,
        pair=AssetPair(
            primary=str(trading["primary_asset"]).lower(),
            secondary=str(trading["secondary_asset"]).lower(),
        ),
        trade_size_bps=int(trading.get("trade_size_bps", 5000)),
        snapshot=snapshot,
        adapter=(str(enzyme.get("uniswap_v3_adapter") or "").strip() or None),
        integration_manager=(str(enzyme.get("integration_manager") or "").strip() or None),
        balances=ERC20BalanceReader(conn.w3),
        price_oracle=UniswapV3PriceOracle(
            conn.w3,
            quoter_address=str(uniswap["quoter"]),
            fee_tiers=uniswap.get("fee_tiers") or DEFAULT_FEE_TIERS,
        ),
        submitter=submitter,
    )

    if submitter.dry_run:
        logger.warning("DRY RUN: transactions will be simulated and priced but never sent")
    if not session.adapter or not session.integration_manager:
        logger.warning("Enzyme adapter / integration manager not configured for %s; every trade will be skipped", network)
    return session
