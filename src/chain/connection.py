import logging

from web3 import Web3

from src.utils.config_loader import require_env

logger = logging.getLogger(__name__)

# HTTP timeout for every JSON-RPC request, in seconds
RPC_REQUEST_TIMEOUT = 60


class ChainConnection:
    """JSON-RPC provider plus the signing account for one network."""

    def __init__(self, network: str, chain_id: int, node_endpoint: str | None = None, private_key: str | None = None):
        self.network = network
        self.chain_id = int(chain_id)
        self.node_endpoint = node_endpoint or require_env(f"{network}_NODE_ENDPOINT")
        key = private_key or require_env(f"{network}_PRIVATE_KEY")

        self.w3 = Web3(Web3.HTTPProvider(self.node_endpoint, request_kwargs={"timeout": RPC_REQUEST_TIMEOUT}))
        self.account = self.w3.eth.account.from_key(key)

    @property
    def address(self) -> str:
        return self.account.address

    def connect(self) -> bool:
        """
        Check the node is reachable and serves the configured chain.

        Returns:
            True if connected to the expected chain, False otherwise
        """
        try:
            if not self.w3.is_connected():
                logger.error(f"RPC node for {self.network} is not reachable")
                return False
            remote_chain_id = int(self.w3.eth.chain_id)
        except Exception as e:
            logger.error(f"Failed to connect to {self.network} RPC node: {type(e).__name__}: {e}")
            return False

        if remote_chain_id != self.chain_id:
            logger.error(f"RPC node serves chain {remote_chain_id}, expected {self.chain_id} for {self.network}")
            return False

        logger.info(f"Connected to {self.network} (chain id {remote_chain_id}) as {self.address}")
        return True
