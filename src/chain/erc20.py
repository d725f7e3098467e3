from __future__ import annotations

from web3 import Web3

ERC20_BALANCE_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class ERC20BalanceReader:
    """Raw (smallest unit) ERC-20 balances."""

    def __init__(self, w3: Web3):
        self.w3 = w3

    def balance_of(self, holder: str, token: str) -> int:
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_BALANCE_ABI)
        return int(contract.functions.balanceOf(Web3.to_checksum_address(holder)).call())
