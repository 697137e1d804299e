"""
Environment Configuration

Loads the claim signer settings from process environment variables,
optionally seeded from a ``.env`` file via python-dotenv. Settings are read
and validated at the entry of every request so a misconfigured deployment
fails fast with ``ConfigurationError`` instead of signing with partial
configuration.

Environment Variables:
    - SIGNER_PK: Server private key used for EIP-712 signing (required)
    - CONTRACT_ADDR: NFT contract, used as ``verifyingContract`` (required)
    - RPC_URL: JSON-RPC endpoint of the chain node (required)
    - STORE_ADDR: Store contract emitting ``Purchased`` events (required)
    - DOMAIN_NAME / DOMAIN_VERSION: Optional EIP-712 domain overrides
    - TIER_OFFSET / MIN_TIER: Tier mapping rules (defaults 0 / 1)
    - ALLOW_ORIGIN: CORS allow-origin (default ``*``)
    - DEFAULT_TOKEN_NAME: Domain name used when ``name()`` cannot be read
    - RESPONSE_MODE: ``candidates`` (default) or ``single``
    - LOG_LEVEL: Logging level for ``setup_logging`` (default ``INFO``)
"""

import os
from pathlib import Path
from typing import List, Literal, Optional, Union

import dotenv
from eth_account import Account
from eth_utils import is_address
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from .engine.exceptions import ConfigurationError


DEFAULT_ALLOW_ORIGIN = "*"
DEFAULT_TOKEN_NAME = "DreamPlay Membership"

#: Required variables, in the order they are reported when missing.
REQUIRED_ENV_VARS = ("SIGNER_PK", "CONTRACT_ADDR", "RPC_URL", "STORE_ADDR")

_ENV_FIELDS = {
    "SIGNER_PK": "signer_private_key",
    "CONTRACT_ADDR": "contract_address",
    "RPC_URL": "rpc_url",
    "STORE_ADDR": "store_address",
    "DOMAIN_NAME": "domain_name",
    "DOMAIN_VERSION": "domain_version",
    "TIER_OFFSET": "tier_offset",
    "MIN_TIER": "min_tier",
    "ALLOW_ORIGIN": "allow_origin",
    "DEFAULT_TOKEN_NAME": "default_token_name",
    "RESPONSE_MODE": "response_mode",
    "LOG_LEVEL": "log_level",
}


def cors_origin_from_env() -> str:
    """Return the CORS allow-origin without validating the rest of the settings."""
    return os.getenv("ALLOW_ORIGIN") or DEFAULT_ALLOW_ORIGIN


class ClaimSignerSettings(BaseModel):
    """
    Validated claim signer configuration.

    Required values are typed ``Optional`` so that ``require()`` can report
    every missing variable at once instead of failing on the first one.

    Example:
        settings = ClaimSignerSettings.from_env().require()
        print(settings.signer_address)
    """

    model_config = ConfigDict(frozen=True)

    signer_private_key: Optional[str] = Field(None, repr=False, description="EIP-712 signing key")
    contract_address: Optional[str] = Field(None, description="Verifying NFT contract")
    rpc_url: Optional[str] = Field(None, description="Chain node JSON-RPC URL")
    store_address: Optional[str] = Field(None, description="Store contract emitting Purchased")

    domain_name: Optional[str] = Field(None, description="EIP-712 domain name override")
    domain_version: Optional[str] = Field(None, description="EIP-712 domain version tried first")
    tier_offset: int = Field(0, description="Added to the resolved tier")
    min_tier: int = Field(1, description="Lower clamp for the resolved tier")

    allow_origin: str = Field(DEFAULT_ALLOW_ORIGIN, description="CORS Access-Control-Allow-Origin")
    default_token_name: str = Field(DEFAULT_TOKEN_NAME, description="Fallback when name() fails")
    response_mode: Literal["candidates", "single"] = Field("candidates")
    log_level: str = Field("INFO")

    @field_validator(
        "signer_private_key", "contract_address", "rpc_url", "store_address",
        "domain_name", "domain_version", mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("tier_offset", "min_tier", mode="before")
    @classmethod
    def _parse_int(cls, value: Union[str, int, None], info) -> int:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0 if info.field_name == "tier_offset" else 1
        return int(str(value).strip())

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "ClaimSignerSettings":
        """
        Build settings from environment variables.

        Args:
            env_file: Optional dotenv file loaded before reading the environment.
                      Existing environment variables take precedence.

        Returns:
            ClaimSignerSettings (not yet checked for required values).

        Raises:
            ConfigurationError: If an optional value has an invalid format.
        """
        if env_file is not None:
            dotenv.load_dotenv(dotenv_path=env_file)

        raw = {
            field: os.environ[env_name]
            for env_name, field in _ENV_FIELDS.items()
            if os.environ.get(env_name) not in (None, "")
        }
        try:
            return cls(**raw)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e.errors()[0]['msg']}") from e

    def missing(self) -> List[str]:
        """Names of required environment variables that are not set."""
        values = {
            "SIGNER_PK": self.signer_private_key,
            "CONTRACT_ADDR": self.contract_address,
            "RPC_URL": self.rpc_url,
            "STORE_ADDR": self.store_address,
        }
        return [name for name in REQUIRED_ENV_VARS if not values[name]]

    def require(self) -> "ClaimSignerSettings":
        """
        Ensure every required value is present, both contract addresses are
        well formed and the signing key decodes.

        Returns:
            self, for chaining.

        Raises:
            ConfigurationError: Listing all missing variables, or naming the
                first malformed one.
        """
        missing = self.missing()
        if missing:
            raise ConfigurationError(f"Missing env: {', '.join(missing)}")

        for env_name, value in (("CONTRACT_ADDR", self.contract_address), ("STORE_ADDR", self.store_address)):
            if not is_address(value):
                raise ConfigurationError(f"{env_name} is not a valid address: {value}")

        # Undecodable keys surface here rather than inside the signing loop.
        _ = self.signer_address
        return self

    @property
    def signer_address(self) -> str:
        """Checksum address derived from the signing key."""
        try:
            return Account.from_key(self.signer_private_key).address
        except Exception as e:
            raise ConfigurationError("SIGNER_PK is not a valid private key") from e
