"""
Abstract Base Class for Chain Readers

Defines the read-only interface the claim flow needs from a blockchain node.
Purchase verification and domain resolution depend only on this interface,
so tests and alternative transports can substitute their own reader.

Core Classes:
    - ChainReader: receipt fetch, contract ``name()`` read, chain id query
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class ChainReader(ABC):
    """
    Abstract Base Class for read-only blockchain access.

    Implementations never mutate chain state; every method is a single
    network round trip and may be awaited concurrently with the others.

    Example Implementation:
        class Web3ChainReader(ChainReader):
            # AsyncWeb3 JSON-RPC implementation
            pass
    """

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Mapping[str, Any]]:
        """
        Fetch the receipt of a mined transaction.

        Args:
            tx_hash: 0x-prefixed transaction hash.

        Returns:
            Receipt mapping with at least ``status`` and ``logs``, or ``None``
            when the node does not know the transaction.
        """
        pass

    @abstractmethod
    async def get_contract_name(self, contract_address: str) -> str:
        """
        Read ``name()`` from a contract.

        Args:
            contract_address: Contract to call.

        Returns:
            The contract's name string.

        Raises:
            Exception: Any transport or ABI error; callers apply a fallback.
        """
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        """Return the chain id of the connected network."""
        pass
