"""
Exception and Error Definitions Module

Defines the exception hierarchy for claim signing: configuration loading,
request validation, purchase transaction verification and EIP-712 candidate
signing. Every exception carries the machine readable ``error_code`` and
HTTP ``status_code`` that the request boundary renders into a JSON error
response.

Exception Hierarchy:
    ClaimSignerError (root)
    ├── ConfigurationError
    ├── ValidationError
    ├── MethodNotAllowed
    ├── TransactionVerificationError
    │   ├── TransactionNotFound
    │   ├── TransactionFailed
    │   ├── PurchaseEventNotFound
    │   └── WalletMismatch
    ├── SigningError
    │   └── NoSignatureCandidates
    └── UnhandledError
"""

from typing import Any, Dict, Optional


class ClaimSignerError(Exception):
    """
    Root exception class for all project-specific exceptions.

    Attributes:
        error_code: Short code string returned as ``error`` in the response body.
        status_code: HTTP status used when the error reaches the request boundary.
        detail: Optional human readable explanation.
        extra: Additional response fields (e.g. ``buyer`` for wallet mismatches).
    """

    error_code: str = "server_error"
    status_code: int = 500

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail or self.error_code)
        self.detail = detail
        if error_code is not None:
            self.error_code = error_code
        self.extra = extra or {}

    def to_payload(self) -> Dict[str, Any]:
        """Render the error as the JSON body sent to the caller."""
        payload: Dict[str, Any] = {"error": self.error_code}
        if self.detail:
            payload["detail"] = self.detail
        payload.update(self.extra)
        return payload


class ConfigurationError(ClaimSignerError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Missing SIGNER_PK, CONTRACT_ADDR, RPC_URL or STORE_ADDR
    - Non-integer TIER_OFFSET / MIN_TIER
    - A signer private key that cannot be decoded
    """
    error_code = "missing_configuration"
    status_code = 500


class ValidationError(ClaimSignerError):
    """
    Raised when the claim request body is malformed or incomplete.

    The ``error_code`` narrows the cause: ``invalid_json``, ``invalid_payload``,
    ``invalid_address``, ``missing_order_reference``, ``invalid_tier`` or
    ``tier_out_of_range``.
    """
    error_code = "invalid_payload"
    status_code = 400


class MethodNotAllowed(ClaimSignerError):
    """Raised for any HTTP method other than POST and OPTIONS."""
    error_code = "method_not_allowed"
    status_code = 405


class TransactionVerificationError(ClaimSignerError):
    """
    Base exception for purchase transaction verification failures.

    Verification is all-or-nothing: any subclass aborts the request before
    signing.
    """
    error_code = "transaction_verification_failed"
    status_code = 400


class TransactionNotFound(TransactionVerificationError):
    """Raised when the node has no receipt for the supplied transaction hash."""
    error_code = "transaction_not_found"


class TransactionFailed(TransactionVerificationError):
    """Raised when the transaction receipt reports a non-success status."""
    error_code = "transaction_failed"


class PurchaseEventNotFound(TransactionVerificationError):
    """
    Raised when no log emitted by the configured store contract decodes as
    a ``Purchased`` event.
    """
    error_code = "purchase_event_not_found"


class WalletMismatch(TransactionVerificationError):
    """
    Raised when the decoded purchase buyer differs from the claiming wallet.

    Attributes (in ``extra``):
        buyer: Buyer address decoded from the event.
        to: Recipient address supplied by the caller.
    """
    error_code = "wallet_mismatch"


class SigningError(ClaimSignerError):
    """Base exception for EIP-712 signing failures."""
    error_code = "signing_failed"
    status_code = 500


class NoSignatureCandidates(SigningError):
    """Raised when every (domain version, type layout) signing attempt failed."""
    error_code = "no_signature_candidates"


class UnhandledError(ClaimSignerError):
    """Wraps any unexpected failure caught at the request boundary."""
    error_code = "server_error"
    status_code = 500
