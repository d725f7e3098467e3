from __future__ import annotations

from typing import Any, Protocol

from src.domain.models import PricedRoute, VaultSnapshot


class SubgraphPort(Protocol):
    def get_vault(self, vault_address: str) -> VaultSnapshot: ...


class PriceRoutePort(Protocol):
    def quote(self, incoming_asset: str, outgoing_asset: str, quantity: int) -> PricedRoute: ...


class GasPricePort(Protocol):
    def get_gas_price_gwei(self) -> float: ...


class BalancePort(Protocol):
    def balance_of(self, holder: str, token: str) -> int: ...


class ChainPort(Protocol):
    """The slice of `web3.eth` the transaction submitter relies on."""

    def call(self, transaction: dict[str, Any]) -> bytes: ...

    def estimate_gas(self, transaction: dict[str, Any]) -> int: ...

    def get_transaction_count(self, address: str, block_identifier: str) -> int: ...

    def send_raw_transaction(self, raw_transaction: bytes) -> bytes: ...

    def wait_for_transaction_receipt(self, transaction_hash: bytes, timeout: float) -> Any: ...
