"""
HTTP Request/Response Schema Models for the Claim Endpoint

Pydantic models for the JSON bodies exchanged with wallet front-ends.

The claim flow consists of:
1. Client POSTs a ``ClaimRequest`` (recipient, tier or txHash, order reference)
2. Server verifies the purchase and resolves tier and domain
3. Server answers with ``ClaimCandidatesResponse`` (or
   ``ClaimSignatureResponse`` in single mode), or an error body
"""

from typing import Any, List, Optional, Union

from pydantic import Field, field_validator

from .bases import CanonicalModel
from ..adapters.evm.schemas import SignatureCandidate


# ============================================================================
# Request
# ============================================================================

class ClaimRequest(CanonicalModel):
    """Claim request body.

    Attributes:
        recipient_address: Wallet that will claim (``to``).
        tier_hint: Tier as a number or numeric string (``tier``).
        order_id: Off-chain order identifier (``orderId``).
        transaction_hash: Purchase transaction hash (``txHash``).
        token_uri: Optional token URI to bind into the claim (``tokenURI``).
    """
    recipient_address: Optional[str] = Field(default=None, alias="to")
    tier_hint: Optional[Any] = Field(default=None, alias="tier")
    order_id: Optional[Union[str, int]] = Field(default=None, alias="orderId")
    transaction_hash: Optional[str] = Field(default=None, alias="txHash")
    token_uri: Optional[str] = Field(default=None, alias="tokenURI")

    @field_validator("recipient_address", "transaction_hash", mode="after")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        # Padded values are kept as sent and fail the format checks.
        return value or None

    @field_validator("order_id", mode="after")
    @classmethod
    def _order_id_to_str(cls, value: Optional[Union[str, int]]) -> Optional[str]:
        if value is None:
            return None
        return str(value) or None


# ============================================================================
# Responses
# ============================================================================

class ClaimCandidatesResponse(CanonicalModel):
    """Multi-candidate response.

    Attributes:
        candidates: Every successful (domain version, layout) signature.
        buyer: Buyer decoded from the purchase event, when a txHash was given.
        sku_id: Purchased SKU id, when a txHash was given.
    """
    candidates: List[SignatureCandidate]
    buyer: Optional[str] = None
    sku_id: Optional[int] = Field(default=None, alias="skuId")


class ClaimSignatureResponse(CanonicalModel):
    """Single-signature response: the first candidate flattened."""
    v: int
    r: str
    s: str
    signature: Optional[str] = None
    order_hash: str = Field(..., alias="orderHash")
    tier: int
    domain_name: str = Field(..., alias="domainName")
    domain_version: str = Field(..., alias="domainVersion")
    token_name: str = Field(..., alias="tokenName")
    chain_id: int = Field(..., alias="chainId")
    signer_address: str = Field(..., alias="signerAddress")
    include_token_uri: bool = Field(..., alias="includeTokenURI")
    buyer: Optional[str] = None
    sku_id: Optional[int] = Field(default=None, alias="skuId")
