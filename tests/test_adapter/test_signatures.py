"""
Tests for EIP-712 claim signing and candidate enumeration.
"""
from unittest.mock import patch

import pytest
from eth_account import Account
from eth_utils import keccak

from claim_signer.adapters.evm.signatures import (
    build_claim_typed_data,
    compute_order_hash,
    sign_claim,
    sign_claim_candidates,
)
from claim_signer.adapters.evm.standards import EXTENDED_LAYOUT, SHORT_LAYOUT, claim_layouts
from claim_signer.engine.exceptions import NoSignatureCandidates
from test_mocks import (
    BUYER_ADDRESS,
    CHAIN_ID,
    CONTRACT_ADDRESS,
    SIGNER_ADDRESS,
    SIGNER_PRIVATE_KEY,
    TOKEN_NAME,
    TX_HASH,
    create_mock_claim,
    create_mock_domain,
)


# ==================== Order hash ====================

def test_order_hash_is_keccak_of_text():
    assert compute_order_hash(TX_HASH) == "0x" + keccak(text=TX_HASH).hex()
    assert len(compute_order_hash("order-1")) == 66


def test_order_hash_is_deterministic_and_distinct():
    hashes = {compute_order_hash(f"order-{i}") for i in range(200)}

    assert len(hashes) == 200
    assert compute_order_hash("order-1") == compute_order_hash("order-1")


# ==================== Typed data ====================

def test_short_typed_data_omits_token_uri():
    claim = create_mock_claim(token_uri="ipfs://token/1")
    typed = build_claim_typed_data(
        claim, domain=create_mock_domain().with_version("1"), layout=SHORT_LAYOUT
    ).to_dict()

    assert typed["primaryType"] == "Claim"
    assert [f["name"] for f in typed["types"]["Claim"]] == ["to", "tier", "orderHash"]
    assert "tokenURI" not in typed["message"]
    assert typed["domain"] == {
        "name": TOKEN_NAME,
        "version": "1",
        "chainId": CHAIN_ID,
        "verifyingContract": CONTRACT_ADDRESS,
    }


def test_extended_typed_data_carries_token_uri():
    claim = create_mock_claim(token_uri="ipfs://token/1")
    typed = build_claim_typed_data(
        claim, domain=create_mock_domain().with_version("2"), layout=EXTENDED_LAYOUT
    ).to_dict()

    assert typed["types"]["Claim"][-1] == {"name": "tokenURI", "type": "string"}
    assert typed["message"]["tokenURI"] == "ipfs://token/1"


def test_layout_order_depends_on_token_uri():
    assert claim_layouts(True) == [EXTENDED_LAYOUT, SHORT_LAYOUT]
    assert claim_layouts(False) == [SHORT_LAYOUT]


# ==================== Signing ====================

def test_sign_claim_is_deterministic():
    claim = create_mock_claim()
    domain = create_mock_domain().with_version("1")

    first = sign_claim(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain)
    second = sign_claim(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain)

    assert (first.v, first.r, first.s) == (second.v, second.r, second.s)
    assert first.v in (27, 28)
    assert len(first.r) == 66 and len(first.s) == 66
    assert first.signature == first.to_packed_hex()
    assert len(first.signature) == 132
    assert first.signer_address == SIGNER_ADDRESS


def test_sign_claim_differs_per_version():
    claim = create_mock_claim()
    domain = create_mock_domain()

    v1 = sign_claim(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain.with_version("1"))
    v2 = sign_claim(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain.with_version("2"))

    assert v1.signature != v2.signature
    assert (v1.domain_version, v2.domain_version) == ("1", "2")


def test_candidates_cover_versions_times_layouts():
    claim = create_mock_claim(token_uri="ipfs://token/1")

    candidates = sign_claim_candidates(
        private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=create_mock_domain(["1", "0", "2"])
    )

    assert [(c.domain_version, c.include_token_uri) for c in candidates] == [
        ("1", True), ("1", False),
        ("0", True), ("0", False),
        ("2", True), ("2", False),
    ]
    assert len({c.signature for c in candidates}) == 6
    assert all(c.tier == 5 and c.order_hash == claim.order_hash for c in candidates)


def test_candidates_without_token_uri_use_short_layout_only():
    candidates = sign_claim_candidates(
        private_key=SIGNER_PRIVATE_KEY,
        claim=create_mock_claim(),
        domain=create_mock_domain(["3", "1", "0", "2"]),
    )

    assert [c.domain_version for c in candidates] == ["3", "1", "0", "2"]
    assert not any(c.include_token_uri for c in candidates)


def test_candidates_are_reproducible():
    claim = create_mock_claim(recipient=BUYER_ADDRESS, token_uri="ipfs://x")
    domain = create_mock_domain()

    first = sign_claim_candidates(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain)
    second = sign_claim_candidates(private_key=SIGNER_PRIVATE_KEY, claim=claim, domain=domain)

    assert [c.to_canonical_json() for c in first] == [c.to_canonical_json() for c in second]


def test_failed_combinations_are_skipped():
    real_sign = Account.sign_typed_data
    calls = []

    def flaky_sign(private_key, full_message):
        calls.append(full_message["domain"]["version"])
        if full_message["domain"]["version"] == "0":
            raise ValueError("malformed types")
        return real_sign(private_key, full_message=full_message)

    with patch("claim_signer.adapters.evm.signatures.Account.sign_typed_data", side_effect=flaky_sign):
        candidates = sign_claim_candidates(
            private_key=SIGNER_PRIVATE_KEY, claim=create_mock_claim(), domain=create_mock_domain()
        )

    assert calls == ["1", "0", "2"]
    assert [c.domain_version for c in candidates] == ["1", "2"]


def test_all_combinations_failing_raises():
    with patch(
        "claim_signer.adapters.evm.signatures.Account.sign_typed_data",
        side_effect=ValueError("boom"),
    ):
        with pytest.raises(NoSignatureCandidates) as exc_info:
            sign_claim_candidates(
                private_key=SIGNER_PRIVATE_KEY,
                claim=create_mock_claim(token_uri="ipfs://x"),
                domain=create_mock_domain(),
            )

    assert exc_info.value.status_code == 500
    assert exc_info.value.to_payload()["error"] == "no_signature_candidates"
