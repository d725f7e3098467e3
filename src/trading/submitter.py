from __future__ import annotations

import logging
import math
from typing import Any

from hexbytes import HexBytes

from src.domain.models import EncodedSwapCall, SubmissionResult
from src.ports.collaborators import ChainPort, GasPricePort
from src.trading.errors import TransactionFailedError

logger = logging.getLogger(__name__)

GWEI = 10**9
DEFAULT_RECEIPT_TIMEOUT_SECONDS = 300


def inflate_gas_limit(estimate: int) -> int:
    """Pad a gas estimate by 10/9 (~11%) against state drift before inclusion."""
    return int(estimate) * 10 // 9


def gwei_to_wei(gas_price_gwei: float) -> int:
    """Round the gwei price up to a whole gwei, then convert to wei."""
    return int(math.ceil(gas_price_gwei)) * GWEI


class TransactionSubmitter:
    """
    Validate, size and send an encoded swap call.

    Each step raises on failure; the scheduler classifies and logs the error.
    """

    def __init__(
        self,
        eth: ChainPort,
        account: Any,
        gas_oracle: GasPricePort,
        chain_id: int,
        *,
        dry_run: bool = False,
        receipt_timeout_seconds: float = DEFAULT_RECEIPT_TIMEOUT_SECONDS,
    ):
        self.eth = eth
        self.account = account
        self.gas_oracle = gas_oracle
        self.chain_id = int(chain_id)
        self.dry_run = bool(dry_run)
        self.receipt_timeout_seconds = float(receipt_timeout_seconds)

    def prepare(self, call: EncodedSwapCall) -> dict[str, Any]:
        """Simulate, estimate gas and price it. Returns the unsigned transaction."""
        tx = call.to_transaction()

        # Reverts here, before any gas is spent.
        self.eth.call(tx)

        estimate = int(self.eth.estimate_gas(tx))
        gas_limit = inflate_gas_limit(estimate)

        gas_price_gwei = self.gas_oracle.get_gas_price_gwei()
        gas_price = gwei_to_wei(gas_price_gwei)

        logger.info(f"gas estimate: {estimate}, gas limit: {gas_limit}")
        logger.info(f"gas price: {gas_price_gwei} gwei ({gas_price} wei)")

        return {
            **tx,
            "gas": gas_limit,
            "gasPrice": gas_price,
            "chainId": self.chain_id,
        }

    def submit(self, call: EncodedSwapCall) -> SubmissionResult | None:
        """
        Run the full submission pipeline.

        Returns None in dry-run mode (nothing is broadcast).
        """
        tx = self.prepare(call)
        if self.dry_run:
            logger.info("Dry run: transaction validated and priced, not sending")
            return None

        tx["nonce"] = self.eth.get_transaction_count(call.sender_address, "pending")
        signed = self.account.sign_transaction(tx)
        tx_hash = self.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = HexBytes(tx_hash).to_0x_hex()
        logger.info("This trade has been submitted to the blockchain. TRANSACTION HASH ==> %s", tx_hash_hex)

        receipt = self.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout_seconds)
        gas_used = int(receipt["gasUsed"])
        if int(receipt.get("status", 1)) != 1:
            raise TransactionFailedError(f"Transaction {tx_hash_hex} reverted on-chain (gas used: {gas_used})")

        logger.info("Transaction successful. You spent %s in gas.", gas_used)
        return SubmissionResult(transaction_hash=tx_hash_hex, gas_used=gas_used)
