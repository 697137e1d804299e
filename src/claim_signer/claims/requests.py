"""
Claim Request Parsing and Validation

Everything here runs before the first network call: a malformed body, an
invalid address or a missing order reference is rejected without touching
the chain node.
"""

import json
import re
from typing import Any, Optional

from eth_utils import is_address, to_checksum_address
from pydantic import ValidationError as PydanticValidationError

from .tiers import parse_declared_tier
from ..engine.exceptions import ValidationError
from ..schemas.https import ClaimRequest


_TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def parse_claim_request(body: Optional[bytes]) -> ClaimRequest:
    """
    Parse a raw JSON body into a ``ClaimRequest``.

    An empty body is treated as ``{}``.

    Raises:
        ValidationError: ``invalid_json`` for unparsable or non-object
            bodies, ``invalid_payload`` for fields of the wrong type.
    """
    try:
        data: Any = json.loads(body or b"{}")
    except ValueError as e:
        raise ValidationError("Request body is not valid JSON", error_code="invalid_json") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", error_code="invalid_json")

    try:
        return ClaimRequest.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise ValidationError(f"Invalid field '{field}': {first['msg']}") from e


def validate_claim_request(request: ClaimRequest) -> ClaimRequest:
    """
    Check a parsed request and normalise it for signing.

    - ``to`` must be present and a valid address; it is checksummed.
    - ``txHash``, when present, must be a 32-byte hex hash.
    - At least one of ``orderId`` / ``txHash`` is required.
    - Without ``txHash`` the tier must be declared explicitly.

    Returns:
        A copy with the checksum recipient and, without a ``txHash``,
        the validated integer tier.

    Raises:
        ValidationError: On the first failed check.
    """
    if not request.recipient_address:
        raise ValidationError("Invalid payload. Expect {to,...}")
    if not is_address(request.recipient_address):
        raise ValidationError(
            f"Invalid address: {request.recipient_address}", error_code="invalid_address"
        )

    if request.transaction_hash and not _TX_HASH_PATTERN.match(request.transaction_hash):
        raise ValidationError(
            "txHash must be a 0x-prefixed 32-byte hex string",
            error_code="invalid_transaction_hash",
        )

    if not request.order_id and not request.transaction_hash:
        raise ValidationError("Provide orderId or txHash", error_code="missing_order_reference")

    update = {"recipient_address": to_checksum_address(request.recipient_address)}
    if not request.transaction_hash:
        update["tier_hint"] = parse_declared_tier(request.tier_hint)

    return request.model_copy(update=update)
