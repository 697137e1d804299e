"""
EVM Claim Schema Models

Pydantic models for the per-request claim signing entities. All classes
inherit from ``CanonicalModel`` so they serialize with their camelCase wire
names. Every instance is built fresh for one request and discarded with it.

Purchase classes:
    - PurchaseEvent: ``Purchased`` log decoded from a verified transaction.

Claim classes:
    - ClaimValue: The payload that is signed (recipient, tier, order hash,
      optional token URI).

Domain classes:
    - SigningDomain: One concrete EIP-712 domain.
    - ResolvedDomain: Domain name, chain and contract plus the ordered
      candidate versions to try.

Result classes:
    - SignatureCandidate: One (domain version, type layout) signature.
"""

from typing import List, Optional

from pydantic import ConfigDict, Field

from ...schemas.bases import CanonicalModel


class PurchaseEvent(CanonicalModel):
    """
    Buyer and SKU decoded from a store ``Purchased`` log.

    Attributes:
        buyer_address: Checksum buyer address (indexed topic 1).
        sku_id: Purchased SKU id (indexed topic 2).
        price: Paid price in the store's settlement token units.
    """
    buyer_address: str = Field(..., alias="buyer", description="Buyer wallet")
    sku_id: int = Field(..., alias="skuId", ge=0, description="Purchased SKU id")
    price: Optional[int] = Field(None, alias="priceUSDC", description="Paid price")

    model_config = ConfigDict(frozen=True)


class ClaimValue(CanonicalModel):
    """
    Claim payload signed for the recipient.

    Attributes:
        recipient_address: Checksum wallet allowed to claim.
        tier: Tier level, always within uint8 range.
        order_hash: keccak-256 of the order identifier (0x-prefixed bytes32).
        token_uri: Optional token URI; only signed by the extended layout.
    """
    recipient_address: str = Field(..., alias="to")
    tier: int = Field(..., ge=0, le=255)
    order_hash: str = Field(..., alias="orderHash", pattern=r"^0x[0-9a-fA-F]{64}$")
    token_uri: Optional[str] = Field(None, alias="tokenURI")

    @property
    def has_token_uri(self) -> bool:
        return isinstance(self.token_uri, str) and len(self.token_uri) > 0


class SigningDomain(CanonicalModel):
    """
    One concrete EIP-712 domain.

    Must match byte-for-byte the domain the verifying contract builds,
    otherwise on-chain recovery yields a different signer.
    """
    name: str
    version: str
    chain_id: int = Field(..., alias="chainId")
    verifying_contract: str = Field(..., alias="verifyingContract")


class ResolvedDomain(CanonicalModel):
    """
    Domain data shared by all candidates plus the versions to enumerate.

    Attributes:
        name: Effective domain name (override or on-chain ``name()``).
        token_name: Name read from the contract, or the configured default.
        chain_id: Connected network id.
        verifying_contract: NFT contract address.
        versions: Ordered, de-duplicated candidate domain versions.
    """
    name: str
    token_name: str = Field(..., alias="tokenName")
    chain_id: int = Field(..., alias="chainId")
    verifying_contract: str = Field(..., alias="verifyingContract")
    versions: List[str] = Field(default_factory=list)

    def with_version(self, version: str) -> SigningDomain:
        return SigningDomain(
            name=self.name,
            version=version,
            chain_id=self.chain_id,
            verifying_contract=self.verifying_contract,
        )


class SignatureCandidate(CanonicalModel):
    """
    One signature produced for a (domain version, type layout) combination.

    Attributes:
        v: ECDSA recovery ID (27 or 28).
        r: r component, 0x-prefixed 64 hex chars.
        s: s component, 0x-prefixed 64 hex chars.
        order_hash: Signed order hash.
        tier: Signed tier.
        domain_name: Domain name used.
        domain_version: Domain version used.
        chain_id: Domain chain id.
        signer_address: Address of the signing key.
        include_token_uri: Whether the extended layout produced this candidate.
        signature: Packed ``r || s || v`` hex.

    Example::

        candidate.to_packed_hex() == candidate.signature
    """
    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes hex)")
    s: str = Field(..., description="Signature s component (32 bytes hex)")
    order_hash: str = Field(..., alias="orderHash")
    tier: int
    domain_name: str = Field(..., alias="domainName")
    domain_version: str = Field(..., alias="domainVersion")
    chain_id: int = Field(..., alias="chainId")
    signer_address: str = Field(..., alias="signerAddress")
    include_token_uri: bool = Field(..., alias="includeTokenURI")
    signature: Optional[str] = Field(None, description="Packed 65-byte signature hex")

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``).

        Returns:
            0x-prefixed 132-character hex string.
        """
        r = self.r.replace("0x", "").replace("0X", "").zfill(64)
        s = self.s.replace("0x", "").replace("0X", "").zfill(64)
        return "0x" + r + s + format(self.v, "02x")
