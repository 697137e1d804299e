"""
Tests for tier resolution and declared tier validation.
"""
import pytest

from claim_signer.claims.tiers import parse_declared_tier, parse_tier_hint, resolve_tier
from claim_signer.engine.exceptions import ValidationError


@pytest.mark.parametrize(
    "value, expected",
    [
        (3, 3.0),
        ("4", 4.0),
        (" 2.5 ", 2.5),
        (None, None),
        ("", None),
        ("gold", None),
        (True, None),
        (float("nan"), None),
        ("inf", None),
        ([1], None),
        (10 ** 400, None),
        ("1" + "0" * 400, None),
    ],
)
def test_parse_tier_hint(value, expected):
    assert parse_tier_hint(value) == expected


def test_resolve_tier_from_sku():
    assert resolve_tier(None, 5) == 5


def test_resolve_tier_applies_offset():
    assert resolve_tier(None, 5, tier_offset=2) == 7


def test_resolve_tier_clamps_to_minimum():
    assert resolve_tier(None, 1, min_tier=3) == 3


def test_resolve_tier_prefers_positive_hint():
    assert resolve_tier("2", 5) == 2
    assert resolve_tier(4, 5, tier_offset=1) == 5


def test_resolve_tier_ignores_unusable_hints():
    assert resolve_tier(0, 5) == 5
    assert resolve_tier(-3, 5) == 5
    assert resolve_tier("abc", 5) == 5
    assert resolve_tier(1.5, 5) == 5
    assert resolve_tier(10 ** 400, 5) == 5


def test_resolve_tier_defaults_to_one():
    assert resolve_tier(None, None) == 1
    assert resolve_tier(None, None, min_tier=0) == 1


def test_resolve_tier_out_of_range():
    with pytest.raises(ValidationError) as exc_info:
        resolve_tier(None, 300)
    assert exc_info.value.error_code == "tier_out_of_range"

    with pytest.raises(ValidationError):
        resolve_tier(None, 250, tier_offset=10)


def test_parse_declared_tier():
    assert parse_declared_tier(3) == 3
    assert parse_declared_tier("7") == 7
    assert parse_declared_tier(0) == 0
    assert parse_declared_tier("255") == 255


@pytest.mark.parametrize("value", [None, "", "gold", 1.5, True, 10 ** 400])
def test_parse_declared_tier_invalid(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_declared_tier(value)
    assert exc_info.value.error_code == "invalid_tier"
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("value", [-1, 256, "1000"])
def test_parse_declared_tier_out_of_range(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_declared_tier(value)
    assert exc_info.value.error_code == "tier_out_of_range"
