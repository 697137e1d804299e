from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


# -----------------------------
# EIP-712 Domain
# -----------------------------

EIP712_DOMAIN_FIELDS: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


@dataclass
class EIP712Domain:
    """
    The four-field EIP-712 domain the Claim contract hashes into its separator.
    """
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


# -----------------------------
# Claim type layouts
# -----------------------------

CLAIM_SHORT_FIELDS: List[Dict[str, str]] = [
    {"name": "to", "type": "address"},
    {"name": "tier", "type": "uint8"},
    {"name": "orderHash", "type": "bytes32"},
]

CLAIM_EXTENDED_FIELDS: List[Dict[str, str]] = CLAIM_SHORT_FIELDS + [
    {"name": "tokenURI", "type": "string"},
]


@dataclass(frozen=True)
class ClaimLayout:
    """
    One candidate shape of the on-chain ``Claim`` struct.

    Attributes:
        include_token_uri: Whether the struct carries a trailing ``tokenURI`` string.
        fields: EIP-712 member list for the ``Claim`` primary type.
    """
    include_token_uri: bool
    fields: List[Dict[str, str]]

    def message_types(self) -> Dict[str, List[Dict[str, str]]]:
        return {"Claim": self.fields}


SHORT_LAYOUT = ClaimLayout(include_token_uri=False, fields=CLAIM_SHORT_FIELDS)
EXTENDED_LAYOUT = ClaimLayout(include_token_uri=True, fields=CLAIM_EXTENDED_FIELDS)


def claim_layouts(has_token_uri: bool) -> List[ClaimLayout]:
    """
    Ordered layouts to attempt for a claim.

    With a token URI the extended layout is preferred and the short one kept
    as a fallback; without one only the short layout is meaningful.
    """
    if has_token_uri:
        return [EXTENDED_LAYOUT, SHORT_LAYOUT]
    return [SHORT_LAYOUT]


# -----------------------------
# Claim message / typed data
# -----------------------------

@dataclass
class ClaimMessage:
    """
    The ``Claim`` payload as signed.

    Attributes:
        to: Checksum recipient address.
        tier: Tier as a uint8.
        orderHash: bytes32 hex digest of the order identifier.
        tokenURI: Only emitted by ``to_dict`` when ``include_token_uri`` is set.
    """
    to: str
    tier: int
    orderHash: str
    tokenURI: Optional[str] = None

    def to_dict(self, include_token_uri: bool = False) -> Dict[str, Any]:
        message: Dict[str, Any] = {
            "to": self.to,
            "tier": self.tier,
            "orderHash": self.orderHash,
        }
        if include_token_uri:
            message["tokenURI"] = self.tokenURI
        return message


@dataclass
class ClaimTypedData:
    """
    Container for a claim's typed data usable with EIP-712 signing routines.

    ``to_dict()`` produces the ``{types, primaryType, domain, message}``
    layout consumed by ``eth_account`` and ``eth_signTypedData_v4``.

    Attributes:
        domain: EIP712Domain instance describing the signing domain.
        message: ClaimMessage carrying the payload.
        layout: Which ``Claim`` struct shape to encode.
    """
    domain: EIP712Domain
    message: ClaimMessage
    layout: ClaimLayout = SHORT_LAYOUT

    primary_type: str = "Claim"

    types: Dict[str, List[Dict[str, str]]] = field(init=False)

    def __post_init__(self) -> None:
        self.types = {"EIP712Domain": EIP712_DOMAIN_FIELDS, **self.layout.message_types()}

    def to_dict(self) -> Dict[str, Any]:
        """Return a dict compatible with EIP-712 structured signing."""
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(include_token_uri=self.layout.include_token_uri),
        }
