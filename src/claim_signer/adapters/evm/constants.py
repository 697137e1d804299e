"""
EVM Constants for Claim Signing

Event layout and ABI fragment for the two contracts the signer reads from,
and the fixed fallback sequence of EIP-712 domain versions.

- ``PURCHASED_*``: signature, topic and data types of the store contract's
  ``Purchased`` event.
- ``NFT_NAME_ABI``: the NFT contract's ``name()`` view, used as the default
  EIP-712 domain name.
"""

from typing import Any, Dict, List, Tuple

from eth_utils import keccak


#: Canonical signature of the store contract's purchase event.
PURCHASED_EVENT_SIGNATURE = (
    "Purchased(address,uint256,uint256,address,address[8],uint256[8],uint256,uint256)"
)

#: topic0 of every ``Purchased`` log.
PURCHASED_EVENT_TOPIC: bytes = keccak(text=PURCHASED_EVENT_SIGNATURE)

#: ABI types of the non-indexed ``Purchased`` fields, in log data order.
PURCHASED_DATA_TYPES: Tuple[str, ...] = (
    "uint256",     # priceUSDC
    "address",     # sponsor
    "address[8]",  # uplines
    "uint256[8]",  # levelPaid
    "uint256",     # storehouseAmt
    "uint256",     # wipAmt
)

NFT_NAME_ABI: List[Dict[str, Any]] = [
    {
        "name": "name",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    }
]

#: Domain versions tried after the configured override, in order.
FALLBACK_DOMAIN_VERSIONS: Tuple[str, ...] = ("1", "0", "2")

#: Receipt ``status`` of a successfully executed transaction.
TX_STATUS_SUCCESS = 1

UINT8_MAX = 255
