"""
EVM Verification Helpers

Purchase verification and local signature checks for the claim flow.

verify_purchase
    Fetch a transaction receipt through a ``ChainReader``, require success
    status, scan the logs emitted by the configured store contract for a
    ``Purchased`` event and check the buyer against the claiming wallet.

decode_purchased_log
    Decode one raw log as a ``Purchased`` event. Raises on any mismatch so
    that ``find_purchase_event`` can skip unrelated logs.

recover_candidate_signer / verify_candidate
    Rebuild the EIP-712 payload of a ``SignatureCandidate`` and recover the
    signer from (v, r, s). Useful for callers that want to confirm a
    candidate before submitting it on-chain.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import to_bytes, to_checksum_address

from ..bases import ChainReader
from .constants import PURCHASED_DATA_TYPES, PURCHASED_EVENT_TOPIC, TX_STATUS_SUCCESS
from .schemas import ClaimValue, PurchaseEvent, SignatureCandidate, SigningDomain
from .signatures import build_claim_typed_data
from .standards import EXTENDED_LAYOUT, SHORT_LAYOUT
from ...engine.exceptions import (
    PurchaseEventNotFound,
    TransactionFailed,
    TransactionNotFound,
    WalletMismatch,
)


logger = logging.getLogger(__name__)

#: Errors meaning "this log is not a Purchased event"; the scan moves on.
_LOG_DECODE_ERRORS = (DecodingError, ValueError, TypeError, KeyError)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_bytes(value: Union[bytes, bytearray, str]) -> bytes:
    """Normalise HexBytes / bytes / 0x-hex strings from a receipt to bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    raise TypeError(f"Unsupported log field type: {type(value).__name__}")


def _same_address(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").lower() == (b or "").lower()


# ---------------------------------------------------------------------------
# Purchased event decoding
# ---------------------------------------------------------------------------

def decode_purchased_log(log: Mapping[str, Any]) -> PurchaseEvent:
    """
    Decode a raw receipt log as a store ``Purchased`` event.

    ``buyer`` and ``skuId`` are indexed (topics 1 and 2); the remaining
    fields (price, sponsor, 8 uplines, 8 level payouts, storehouse and wip
    amounts) are ABI-encoded in ``data`` and must decode cleanly.

    Args:
        log: Receipt log with ``topics`` and ``data``.

    Returns:
        PurchaseEvent with checksum buyer, sku id and price.

    Raises:
        ValueError: If the log is not a ``Purchased`` event.
        DecodingError: If the data section does not match the event schema.
    """
    topics = [_as_bytes(topic) for topic in log["topics"]]
    if len(topics) != 3 or topics[0] != PURCHASED_EVENT_TOPIC:
        raise ValueError("Log is not a Purchased event")
    if len(topics[1]) != 32 or len(topics[2]) != 32:
        raise ValueError("Malformed Purchased topics")

    price, _sponsor, _uplines, _level_paid, _storehouse, _wip = abi_decode(
        list(PURCHASED_DATA_TYPES), _as_bytes(log["data"])
    )

    return PurchaseEvent(
        buyer_address=to_checksum_address(topics[1][-20:]),
        sku_id=int.from_bytes(topics[2], "big"),
        price=price,
    )


def find_purchase_event(
    logs: Iterable[Mapping[str, Any]],
    store_address: str,
) -> Optional[PurchaseEvent]:
    """
    Return the first ``Purchased`` event emitted by ``store_address``.

    Logs from other contracts are skipped; logs from the store that fail to
    decode are ignored and the scan continues.
    """
    for log in logs:
        if not _same_address(log.get("address"), store_address):
            continue
        try:
            return decode_purchased_log(log)
        except _LOG_DECODE_ERRORS as e:
            logger.debug("Skipping undecodable store log: %s", e)
    return None


async def verify_purchase(
    reader: ChainReader,
    *,
    tx_hash: str,
    expected_buyer: str,
    store_address: str,
) -> PurchaseEvent:
    """
    Verify that ``tx_hash`` is a successful store purchase by ``expected_buyer``.

    Args:
        reader:         Chain reader used to fetch the receipt.
        tx_hash:        Purchase transaction hash supplied by the caller.
        expected_buyer: Wallet requesting the claim.
        store_address:  Store contract whose logs are trusted.

    Returns:
        The decoded ``PurchaseEvent``.

    Raises:
        TransactionNotFound: No receipt exists for ``tx_hash``.
        TransactionFailed: Receipt status is not success.
        PurchaseEventNotFound: No decodable ``Purchased`` log from the store.
        WalletMismatch: The event buyer is not ``expected_buyer``.
    """
    receipt = await reader.get_transaction_receipt(tx_hash)
    if receipt is None:
        raise TransactionNotFound(f"No receipt found for transaction {tx_hash}")

    if receipt.get("status") != TX_STATUS_SUCCESS:
        raise TransactionFailed(f"Transaction {tx_hash} did not succeed")

    event = find_purchase_event(receipt.get("logs") or [], store_address)
    if event is None:
        raise PurchaseEventNotFound("No Purchased event found for this tx")

    if not _same_address(event.buyer_address, expected_buyer):
        raise WalletMismatch(
            "Transaction buyer does not match the connected wallet",
            extra={"buyer": event.buyer_address, "to": expected_buyer},
        )

    return event


# ---------------------------------------------------------------------------
# Candidate signature verification
# ---------------------------------------------------------------------------

def recover_candidate_signer(
    candidate: SignatureCandidate,
    claim: ClaimValue,
    *,
    verifying_contract: str,
) -> str:
    """
    Recover the address that produced ``candidate`` for ``claim``.

    The typed data is rebuilt from the candidate's own domain name, version,
    chain id and layout flag, so the result only equals the server signer
    when the candidate is internally consistent.

    Returns:
        Checksum address recovered from (v, r, s).
    """
    domain = SigningDomain(
        name=candidate.domain_name,
        version=candidate.domain_version,
        chain_id=candidate.chain_id,
        verifying_contract=verifying_contract,
    )
    layout = EXTENDED_LAYOUT if candidate.include_token_uri else SHORT_LAYOUT
    typed_data = build_claim_typed_data(claim, domain=domain, layout=layout)
    signable = encode_typed_data(full_message=typed_data.to_dict())
    return Account.recover_message(
        signable, vrs=(candidate.v, int(candidate.r, 16), int(candidate.s, 16))
    )


def verify_candidate(
    candidate: SignatureCandidate,
    claim: ClaimValue,
    *,
    verifying_contract: str,
    expected_signer: Optional[str] = None,
) -> bool:
    """
    Check that ``candidate`` recovers to ``expected_signer``.

    Args:
        expected_signer: Defaults to the candidate's ``signer_address``.

    Returns:
        ``True`` when recovery succeeds and matches, ``False`` otherwise.
    """
    try:
        recovered = recover_candidate_signer(
            candidate, claim, verifying_contract=verifying_contract
        )
    except Exception:
        return False
    return _same_address(recovered, expected_signer or candidate.signer_address)
