"""
Tests for environment configuration loading and logging setup.
"""
import logging
import os

import pytest

from claim_signer.config import ClaimSignerSettings, cors_origin_from_env
from claim_signer.engine.exceptions import ConfigurationError
from claim_signer.logs import setup_logging
from test_mocks import CONTRACT_ADDRESS, RPC_URL, SIGNER_ADDRESS, SIGNER_PRIVATE_KEY, STORE_ADDRESS


ENV_VARS = [
    "SIGNER_PK", "CONTRACT_ADDR", "RPC_URL", "STORE_ADDR", "DOMAIN_NAME", "DOMAIN_VERSION",
    "TIER_OFFSET", "MIN_TIER", "ALLOW_ORIGIN", "DEFAULT_TOKEN_NAME", "RESPONSE_MODE", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    clean_env.setenv("SIGNER_PK", SIGNER_PRIVATE_KEY)
    clean_env.setenv("CONTRACT_ADDR", CONTRACT_ADDRESS)
    clean_env.setenv("RPC_URL", RPC_URL)
    clean_env.setenv("STORE_ADDR", STORE_ADDRESS)
    return clean_env


def test_from_env_defaults(full_env):
    settings = ClaimSignerSettings.from_env().require()

    assert settings.signer_address == SIGNER_ADDRESS
    assert settings.tier_offset == 0
    assert settings.min_tier == 1
    assert settings.allow_origin == "*"
    assert settings.default_token_name == "DreamPlay Membership"
    assert settings.response_mode == "candidates"
    assert settings.domain_name is None


def test_from_env_optional_values(full_env):
    full_env.setenv("DOMAIN_NAME", "Claimer")
    full_env.setenv("DOMAIN_VERSION", " 3 ")
    full_env.setenv("TIER_OFFSET", "2")
    full_env.setenv("MIN_TIER", "4")
    full_env.setenv("ALLOW_ORIGIN", "https://app.example")
    full_env.setenv("RESPONSE_MODE", "single")

    settings = ClaimSignerSettings.from_env()

    assert settings.domain_name == "Claimer"
    assert settings.domain_version == "3"
    assert (settings.tier_offset, settings.min_tier) == (2, 4)
    assert settings.allow_origin == "https://app.example"
    assert settings.response_mode == "single"


def test_from_env_reads_dotenv_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"SIGNER_PK={SIGNER_PRIVATE_KEY}\n"
        f"CONTRACT_ADDR={CONTRACT_ADDRESS}\n"
        f"RPC_URL={RPC_URL}\n"
        f"STORE_ADDR={STORE_ADDRESS}\n"
    )

    try:
        settings = ClaimSignerSettings.from_env(env_file=env_file)
    finally:
        # load_dotenv writes to os.environ directly, outside monkeypatch's undo log
        for name in ("SIGNER_PK", "CONTRACT_ADDR", "RPC_URL", "STORE_ADDR"):
            os.environ.pop(name, None)

    assert settings.missing() == []
    assert settings.signer_address == SIGNER_ADDRESS


def test_require_lists_every_missing_variable(clean_env):
    clean_env.setenv("RPC_URL", RPC_URL)

    with pytest.raises(ConfigurationError) as exc_info:
        ClaimSignerSettings.from_env().require()

    payload = exc_info.value.to_payload()
    assert exc_info.value.status_code == 500
    assert payload["error"] == "missing_configuration"
    assert payload["detail"] == "Missing env: SIGNER_PK, CONTRACT_ADDR, STORE_ADDR"


def test_invalid_integer_setting(full_env):
    full_env.setenv("TIER_OFFSET", "two")

    with pytest.raises(ConfigurationError):
        ClaimSignerSettings.from_env()


def test_invalid_addresses_and_key(full_env):
    full_env.setenv("STORE_ADDR", "0xnope")
    with pytest.raises(ConfigurationError, match="STORE_ADDR"):
        ClaimSignerSettings.from_env().require()

    full_env.setenv("STORE_ADDR", STORE_ADDRESS)
    full_env.setenv("SIGNER_PK", "0x1234")
    with pytest.raises(ConfigurationError, match="SIGNER_PK"):
        ClaimSignerSettings.from_env().require()


def test_private_key_hidden_from_repr(settings):
    assert SIGNER_PRIVATE_KEY not in repr(settings)


def test_cors_origin_from_env(clean_env):
    assert cors_origin_from_env() == "*"
    clean_env.setenv("ALLOW_ORIGIN", "https://app.example")
    assert cors_origin_from_env() == "https://app.example"


def test_setup_logging_sets_package_level():
    setup_logging(level="debug", detailed=True)
    try:
        assert logging.getLogger("claim_signer").level == logging.DEBUG
    finally:
        setup_logging()
    assert logging.getLogger("claim_signer").level == logging.INFO
