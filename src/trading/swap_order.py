"""
Encode Uniswap V3 swaps as Enzyme vault calls.

The vault never calls Uniswap directly. The comptroller forwards
`callOnExtension(integrationManager, CALL_ON_INTEGRATION, callArgs)`, the
integration manager checks the adapter and calls `takeOrder` on it with the
swap arguments.
"""

from __future__ import annotations

import logging
from typing import Sequence

from eth_abi import encode
from web3 import Web3

from src.domain.models import EncodedSwapCall, PricedRoute, TradeIntent

logger = logging.getLogger(__name__)

SLIPPAGE_TOLERANCE_BPS = 500
_BPS = 10000

# IntegrationManager action ids; only CallOnIntegration is used here.
CALL_ON_INTEGRATION = 0

TAKE_ORDER_SELECTOR = bytes(Web3.keccak(text="takeOrder(address,bytes,bytes)")[:4])
CALL_ON_EXTENSION_SELECTOR = bytes(Web3.keccak(text="callOnExtension(address,uint256,bytes)")[:4])


def apply_slippage(output_amount: int, tolerance_bps: int = SLIPPAGE_TOLERANCE_BPS) -> int:
    """Minimum acceptable incoming amount; integer maths, truncates."""
    return int(output_amount) * (_BPS - int(tolerance_bps)) // _BPS


def encode_take_order_args(
    min_incoming_amount: int,
    outgoing_amount: int,
    hop_addresses: Sequence[str],
    hop_fees: Sequence[int],
) -> bytes:
    """UniswapV3Adapter takeOrder arguments: (address[] path, uint24[] fees, uint256 outgoing, uint256 minIncoming)."""
    return encode(
        ["address[]", "uint24[]", "uint256", "uint256"],
        [
            [Web3.to_checksum_address(a) for a in hop_addresses],
            [int(f) for f in hop_fees],
            int(outgoing_amount),
            int(min_incoming_amount),
        ],
    )


def encode_call_on_integration_args(adapter: str, selector: bytes, encoded_call_args: bytes) -> bytes:
    return encode(
        ["address", "bytes4", "bytes"],
        [Web3.to_checksum_address(adapter), selector, encoded_call_args],
    )


def encode_call_on_extension(extension: str, action_id: int, call_args: bytes) -> bytes:
    """Calldata for ComptrollerLib.callOnExtension."""
    return CALL_ON_EXTENSION_SELECTOR + encode(
        ["address", "uint256", "bytes"],
        [Web3.to_checksum_address(extension), int(action_id), call_args],
    )


def build_swap_call(
    intent: TradeIntent,
    route: PricedRoute,
    *,
    adapter: str | None,
    integration_manager: str | None,
    comptroller: str | None,
    sender: str,
) -> EncodedSwapCall | None:
    """
    Build the comptroller call for one swap.

    Returns None (and logs why) when a contract address is missing or the route
    has no usable path; these are skips, not errors.
    """
    if not adapter or not integration_manager or not comptroller:
        logger.warning(
            "Missing a contract address. Uniswap adapter: %s, integration manager: %s, comptroller: %s",
            adapter or "-",
            integration_manager or "-",
            comptroller or "-",
        )
        return None

    if not route.is_complete:
        logger.warning("Uniswap route is missing path or pools (status=%s)", route.status.value)
        return None

    min_incoming = apply_slippage(route.output_amount)
    take_order_args = encode_take_order_args(
        min_incoming_amount=min_incoming,
        outgoing_amount=intent.outgoing_amount,
        hop_addresses=route.hop_addresses,
        hop_fees=route.hop_fees,
    )
    call_args = encode_call_on_integration_args(adapter, TAKE_ORDER_SELECTOR, take_order_args)

    logger.info(
        "Swap %s: outgoing %s of %s, min incoming %s of %s (quoted %s)",
        intent.direction.value,
        intent.outgoing_amount,
        intent.outgoing_asset_id,
        min_incoming,
        intent.incoming_asset_id,
        route.output_amount,
    )
    return EncodedSwapCall(
        adapter_address=Web3.to_checksum_address(adapter),
        integration_manager_address=Web3.to_checksum_address(integration_manager),
        comptroller_address=Web3.to_checksum_address(comptroller),
        payload=call_args,
        sender_address=Web3.to_checksum_address(sender),
        calldata=encode_call_on_extension(integration_manager, CALL_ON_INTEGRATION, call_args),
    )
