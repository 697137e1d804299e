from .requests import parse_claim_request, validate_claim_request
from .tiers import parse_tier_hint, parse_declared_tier, resolve_tier, ensure_uint8

__all__ = [
    "parse_claim_request",
    "validate_claim_request",
    "parse_tier_hint",
    "parse_declared_tier",
    "resolve_tier",
    "ensure_uint8",
]
