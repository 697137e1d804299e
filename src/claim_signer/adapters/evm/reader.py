"""
EVM Chain Reader

``AsyncWeb3`` implementation of ``ChainReader`` over a JSON-RPC endpoint.

Dependencies:
    - web3.py: For blockchain RPC interaction
"""

import logging
from typing import Any, Mapping, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound

from ..bases import ChainReader
from .constants import NFT_NAME_ABI


logger = logging.getLogger(__name__)


class Web3ChainReader(ChainReader):
    """
    Read-only chain access through ``AsyncWeb3``.

    Attributes:
        w3: AsyncWeb3 instance bound to the configured RPC endpoint.

    Example:
        reader = Web3ChainReader(rpc_url="https://sepolia.base.org")
        receipt = await reader.get_transaction_receipt("0x...")
    """

    def __init__(self, rpc_url: Optional[str] = None, w3: Optional[AsyncWeb3] = None, request_timeout: int = 30):
        """
        Args:
            rpc_url: JSON-RPC endpoint URL. Ignored when ``w3`` is given.
            w3: Pre-built AsyncWeb3 instance (tests, shared providers).
            request_timeout: HTTP request timeout in seconds.

        Raises:
            ValueError: If neither ``rpc_url`` nor ``w3`` is provided.
        """
        if w3 is None:
            if not rpc_url:
                raise ValueError("rpc_url or w3 must be provided")
            w3 = AsyncWeb3(
                AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
            )
        self.w3 = w3

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Mapping[str, Any]]:
        try:
            return await self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            logger.debug("No receipt for transaction %s", tx_hash)
            return None

    async def get_contract_name(self, contract_address: str) -> str:
        contract = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract_address),
            abi=NFT_NAME_ABI,
        )
        return await contract.functions.name().call()

    async def get_chain_id(self) -> int:
        return await self.w3.eth.chain_id
