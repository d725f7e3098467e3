from __future__ import annotations

import logging
from typing import Iterable

from web3 import Web3
from web3.exceptions import ContractLogicError

from src.domain.models import PricedRoute

logger = logging.getLogger(__name__)

DEFAULT_FEE_TIERS = (100, 500, 3000, 10000)

QUOTER_V2_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct IQuoterV2.QuoteExactInputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "quoteExactInputSingle",
        "outputs": [
            {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
            {"internalType": "uint160", "name": "sqrtPriceX96After", "type": "uint160"},
            {"internalType": "uint32", "name": "initializedTicksCrossed", "type": "uint32"},
            {"internalType": "uint256", "name": "gasEstimate", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    }
]


class UniswapV3PriceOracle:
    """
    Price a direct outgoing -> incoming swap on Uniswap V3.

    Every configured fee tier is quoted through QuoterV2 (eth_call only) and the
    pool paying out the most wins. Tiers without a pool or liquidity revert and
    are skipped.
    """

    def __init__(self, w3: Web3, quoter_address: str, fee_tiers: Iterable[int] = DEFAULT_FEE_TIERS):
        self.w3 = w3
        self.quoter = w3.eth.contract(address=Web3.to_checksum_address(quoter_address), abi=QUOTER_V2_ABI)
        self.fee_tiers = tuple(int(f) for f in fee_tiers)

    def _quote_tier(self, token_in: str, token_out: str, quantity: int, fee: int) -> int | None:
        params = (token_in, token_out, int(quantity), int(fee), 0)
        try:
            amount_out, _, _, _ = self.quoter.functions.quoteExactInputSingle(params).call()
        except ContractLogicError as e:
            logger.debug(f"No Uniswap V3 quote for fee tier {fee}: {e}")
            return None
        return int(amount_out)

    def quote(self, incoming_asset: str, outgoing_asset: str, quantity: int) -> PricedRoute:
        if int(quantity) <= 0:
            return PricedRoute.error("quantity must be positive")

        token_in = Web3.to_checksum_address(outgoing_asset)
        token_out = Web3.to_checksum_address(incoming_asset)

        best_amount = 0
        best_fee = None
        for fee in self.fee_tiers:
            amount = self._quote_tier(token_in, token_out, quantity, fee)
            if amount is not None and amount > best_amount:
                best_amount, best_fee = amount, fee

        if best_fee is None:
            return PricedRoute.error(f"no Uniswap V3 pool quotes {outgoing_asset} -> {incoming_asset}")

        logger.info(f"Best Uniswap V3 route: fee tier {best_fee}, {quantity} in -> {best_amount} out")
        return PricedRoute.ok(best_amount, (token_in, token_out), (best_fee,))
