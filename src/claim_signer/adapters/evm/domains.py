"""
EIP-712 Domain Resolution

Determines the signing domain of the NFT contract: its name (configured
override, else on-chain ``name()``, else a default), the connected chain id,
and the ordered candidate versions the signer will try.
"""

import asyncio
import logging
from typing import List, Optional

from eth_utils import is_address, to_checksum_address

from ..bases import ChainReader
from .constants import FALLBACK_DOMAIN_VERSIONS
from .schemas import ResolvedDomain
from ...config import DEFAULT_TOKEN_NAME
from ...engine.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def candidate_versions(override: Optional[str] = None) -> List[str]:
    """
    Ordered domain versions to try.

    The configured override (if any) comes first, followed by the fixed
    fallbacks; duplicates are dropped keeping first-seen order.

    Example::

        candidate_versions("2")   # ["2", "1", "0"]
        candidate_versions(None)  # ["1", "0", "2"]
    """
    ordered = [_clean(override), *FALLBACK_DOMAIN_VERSIONS]
    return list(dict.fromkeys(v for v in ordered if v))


async def read_token_name(
    reader: ChainReader,
    contract_address: str,
    default: str = DEFAULT_TOKEN_NAME,
) -> str:
    """Read ``name()`` from the contract, falling back to ``default`` on any failure."""
    try:
        name = await reader.get_contract_name(contract_address)
    except Exception as e:
        logger.warning("name() call failed on %s, using default: %s", contract_address, e)
        return default
    return name or default


async def resolve_domain(
    reader: ChainReader,
    *,
    contract_address: str,
    domain_name: Optional[str] = None,
    domain_version: Optional[str] = None,
    default_token_name: str = DEFAULT_TOKEN_NAME,
) -> ResolvedDomain:
    """
    Resolve the signing domain of ``contract_address``.

    The ``name()`` read and the chain id query are independent and run
    concurrently.

    Args:
        reader:             Chain reader.
        contract_address:   Verifying NFT contract.
        domain_name:        Optional name override (blank is ignored).
        domain_version:     Optional version tried before the fallbacks.
        default_token_name: Name used when ``name()`` cannot be read.

    Returns:
        ResolvedDomain with candidate versions.

    Raises:
        ConfigurationError: If ``contract_address`` is not a valid address.
    """
    if not is_address(contract_address):
        raise ConfigurationError(f"CONTRACT_ADDR is not a valid address: {contract_address}")

    token_name, chain_id = await asyncio.gather(
        read_token_name(reader, contract_address, default_token_name),
        reader.get_chain_id(),
    )

    return ResolvedDomain(
        name=_clean(domain_name) or token_name,
        token_name=token_name,
        chain_id=int(chain_id),
        verifying_contract=to_checksum_address(contract_address),
        versions=candidate_versions(domain_version),
    )
