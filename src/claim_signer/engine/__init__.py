from .exceptions import (
    ClaimSignerError,
    ConfigurationError,
    ValidationError,
    MethodNotAllowed,
    TransactionVerificationError,
    TransactionNotFound,
    TransactionFailed,
    PurchaseEventNotFound,
    WalletMismatch,
    SigningError,
    NoSignatureCandidates,
    UnhandledError,
)

__all__ = [
    "ClaimSignerError",
    "ConfigurationError",
    "ValidationError",
    "MethodNotAllowed",
    "TransactionVerificationError",
    "TransactionNotFound",
    "TransactionFailed",
    "PurchaseEventNotFound",
    "WalletMismatch",
    "SigningError",
    "NoSignatureCandidates",
    "UnhandledError",
]
