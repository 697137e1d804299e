"""
Tier Resolution

Maps a purchase to the integer tier written into the signed claim. The
tier is a ``uint8`` on-chain, so every resolved value is range checked.
"""

import math
from typing import Any, Optional

from ..adapters.evm.constants import UINT8_MAX
from ..engine.exceptions import ValidationError


def parse_tier_hint(value: Any) -> Optional[float]:
    """
    Coerce a caller supplied tier hint to a finite number.

    Numbers and numeric strings parse; ``None``, booleans, blank or
    non-numeric strings, non-finite values and integers too large for a
    float yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def ensure_uint8(tier: int) -> int:
    """Return ``tier`` unchanged if it fits a uint8, else raise ``tier_out_of_range``."""
    if not 0 <= tier <= UINT8_MAX:
        raise ValidationError(
            f"Resolved tier {tier} does not fit uint8",
            error_code="tier_out_of_range",
        )
    return tier


def resolve_tier(
    tier_hint: Any,
    sku_id: Optional[int],
    *,
    tier_offset: int = 0,
    min_tier: int = 1,
) -> int:
    """
    Resolve the tier of a verified purchase.

    A positive integral hint wins; otherwise the purchased SKU id is used,
    and 1 when neither is available. The offset is then added and the
    result clamped up to ``min_tier``.

    Example::

        resolve_tier(None, 5)                 # 5
        resolve_tier(None, 5, tier_offset=2)  # 7
        resolve_tier(None, 1, min_tier=3)     # 3

    Raises:
        ValidationError: If the final tier falls outside 0..255.
    """
    hint = parse_tier_hint(tier_hint)
    if hint is not None and hint > 0 and hint.is_integer():
        tier = int(hint)
    elif sku_id is not None:
        tier = int(sku_id)
    else:
        tier = 1

    tier += tier_offset
    if tier < min_tier:
        tier = min_tier
    return ensure_uint8(tier)


def parse_declared_tier(value: Any) -> int:
    """
    Validate a tier supplied without a purchase transaction.

    The tier must be an integer or an integer string within uint8 range;
    no offset or minimum is applied.

    Raises:
        ValidationError: ``invalid_tier`` for a missing or non-integral
            value, ``tier_out_of_range`` outside 0..255.
    """
    number = parse_tier_hint(value)
    if number is None or not number.is_integer():
        raise ValidationError(
            "Provide tier as a number or numeric string when no txHash is given",
            error_code="invalid_tier",
        )
    return ensure_uint8(int(number))
