"""
EVM Off-Chain Claim Signing

Local EIP-712 signing of ``Claim`` payloads. All cryptographic operations
are performed in-process using ``eth_account``; no RPC calls are made.

Because the verifying contract's exact domain version and ``Claim`` struct
shape are not known in advance, the signer enumerates every combination of
candidate domain version and type layout and returns each signature that
was produced successfully.

Exported helpers
----------------
compute_order_hash
    keccak-256 of an order identifier string.

build_claim_typed_data
    Wrap a ``ClaimValue`` in an EIP-712 envelope for one domain and layout.

sign_claim
    Sign one (domain, layout) combination and return a ``SignatureCandidate``.

sign_claim_candidates
    Enumerate versions x layouts, collect the successes, and raise
    ``NoSignatureCandidates`` when none succeeded.
"""

import logging
from typing import List, Optional

from eth_account import Account
from eth_utils import keccak

from .schemas import ClaimValue, ResolvedDomain, SignatureCandidate, SigningDomain
from .standards import (
    ClaimLayout,
    ClaimMessage,
    ClaimTypedData,
    EIP712Domain,
    SHORT_LAYOUT,
    claim_layouts,
)
from ...engine.exceptions import NoSignatureCandidates


logger = logging.getLogger(__name__)


def compute_order_hash(order_id: str) -> str:
    """
    Hash an order identifier into the bytes32 ``orderHash`` claim field.

    Args:
        order_id: Order identifier (a purchase transaction hash or an
                  off-chain order id).

    Returns:
        0x-prefixed keccak-256 digest of the UTF-8 encoded identifier.
    """
    return "0x" + keccak(text=str(order_id)).hex()


def build_claim_typed_data(
    claim: ClaimValue,
    *,
    domain: SigningDomain,
    layout: ClaimLayout = SHORT_LAYOUT,
) -> ClaimTypedData:
    """
    Build the EIP-712 envelope for ``claim`` without signing.

    Args:
        claim:  Claim payload.
        domain: Concrete signing domain.
        layout: ``Claim`` struct shape to encode.

    Returns:
        ``ClaimTypedData`` whose ``to_dict()`` is compatible with
        ``eth_account.sign_typed_data`` and ``eth_signTypedData_v4``.
    """
    return ClaimTypedData(
        domain=EIP712Domain(
            name=domain.name,
            version=domain.version,
            chainId=domain.chain_id,
            verifyingContract=domain.verifying_contract,
        ),
        message=ClaimMessage(
            to=claim.recipient_address,
            tier=claim.tier,
            orderHash=claim.order_hash,
            tokenURI=claim.token_uri,
        ),
        layout=layout,
    )


def sign_claim(
    *,
    private_key: str,
    claim: ClaimValue,
    domain: SigningDomain,
    layout: ClaimLayout = SHORT_LAYOUT,
    signer_address: Optional[str] = None,
) -> SignatureCandidate:
    """
    Sign ``claim`` for one domain and layout.

    ECDSA nonces are derived deterministically (RFC 6979), so identical
    inputs always yield identical (v, r, s).

    Args:
        private_key:    Hex-encoded secp256k1 signing key.
        claim:          Claim payload.
        domain:         Concrete signing domain.
        layout:         ``Claim`` struct shape.
        signer_address: Address of ``private_key``; derived when omitted.

    Returns:
        ``SignatureCandidate`` tagged with the domain version and layout.
    """
    typed_data = build_claim_typed_data(claim, domain=domain, layout=layout)
    signed = Account.sign_typed_data(private_key, full_message=typed_data.to_dict())

    candidate = SignatureCandidate(
        v=signed.v,
        r="0x" + signed.r.to_bytes(32, "big").hex(),
        s="0x" + signed.s.to_bytes(32, "big").hex(),
        order_hash=claim.order_hash,
        tier=claim.tier,
        domain_name=domain.name,
        domain_version=domain.version,
        chain_id=domain.chain_id,
        signer_address=signer_address or Account.from_key(private_key).address,
        include_token_uri=layout.include_token_uri,
    )
    return candidate.model_copy(update={"signature": candidate.to_packed_hex()})


def sign_claim_candidates(
    *,
    private_key: str,
    claim: ClaimValue,
    domain: ResolvedDomain,
) -> List[SignatureCandidate]:
    """
    Sign ``claim`` under every candidate domain version and type layout.

    Combinations are visited version-major in the order given by
    ``domain.versions`` and ``claim_layouts``. A combination that fails to
    encode or sign is skipped; the remaining ones are still attempted.

    Args:
        private_key: Hex-encoded secp256k1 signing key.
        claim:       Claim payload.
        domain:      Resolved domain with its candidate versions.

    Returns:
        All successful candidates, in enumeration order.

    Raises:
        NoSignatureCandidates: If no combination could be signed.
    """
    signer_address = Account.from_key(private_key).address
    layouts = claim_layouts(claim.has_token_uri)

    candidates: List[SignatureCandidate] = []
    for version in domain.versions:
        signing_domain = domain.with_version(version)
        for layout in layouts:
            try:
                candidates.append(
                    sign_claim(
                        private_key=private_key,
                        claim=claim,
                        domain=signing_domain,
                        layout=layout,
                        signer_address=signer_address,
                    )
                )
            except Exception as e:
                logger.debug(
                    "Signing failed for version=%s includeTokenURI=%s: %s",
                    version, layout.include_token_uri, e,
                )

    if not candidates:
        raise NoSignatureCandidates("Every domain version and type layout failed to sign")

    return candidates
