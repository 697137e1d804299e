from .reader import Web3ChainReader
from .schemas import (
    PurchaseEvent,
    ClaimValue,
    SigningDomain,
    ResolvedDomain,
    SignatureCandidate,
)
from .signatures import (
    compute_order_hash,
    build_claim_typed_data,
    sign_claim,
    sign_claim_candidates,
)
from .verifies import (
    decode_purchased_log,
    find_purchase_event,
    verify_purchase,
    recover_candidate_signer,
    verify_candidate,
)
from .domains import candidate_versions, read_token_name, resolve_domain

__all__ = [
    "Web3ChainReader",
    "PurchaseEvent",
    "ClaimValue",
    "SigningDomain",
    "ResolvedDomain",
    "SignatureCandidate",
    "compute_order_hash",
    "build_claim_typed_data",
    "sign_claim",
    "sign_claim_candidates",
    "decode_purchased_log",
    "find_purchase_event",
    "verify_purchase",
    "recover_candidate_signer",
    "verify_candidate",
    "candidate_versions",
    "read_token_name",
    "resolve_domain",
]
